from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import JSON, DateTime
from sqlmodel import Field

from apontt.models.base import TimestampedModel, UUIDModel


class PartnerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class Partner(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "partners"

    name: str = Field(index=True)
    email: str = Field(index=True, unique=True)
    cpf: str | None = Field(default=None, max_length=14)
    phone: str | None = Field(default=None, max_length=32)
    whatsapp: str | None = Field(default=None, max_length=32)
    company: str | None = Field(default=None)
    cnpj: str | None = Field(default=None, max_length=18)
    region: str | None = Field(default=None)
    city: str | None = Field(default=None)
    state: str | None = Field(default=None, max_length=2)
    address: str | None = Field(default=None)
    observations: str | None = Field(default=None)

    status: str = Field(default=PartnerStatus.ACTIVE.value, index=True)
    admin_fee_rate: Decimal = Field(default=Decimal("5.00"), max_digits=5, decimal_places=2)
    total_sales: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    total_commissions: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)

    # Painel do parceiro
    password_hash: str | None = Field(default=None)
    access_enabled: bool = Field(default=True)
    dashboard_token: str | None = Field(default=None, unique=True, index=True, max_length=96)
    last_access: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    access_count: int = Field(default=0)
    access_log: list | None = Field(default_factory=list, sa_type=JSON)
    last_activity: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
