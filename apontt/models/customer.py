from __future__ import annotations

from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlmodel import Field

from apontt.models.base import TimestampedModel, UUIDModel


class CustomerStatus(str, Enum):
    LEAD = "lead"
    QUALIFIED = "qualified"
    CUSTOMER = "customer"


class Customer(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "customers"

    name: str = Field(index=True)
    email: str | None = Field(default=None, index=True)
    phone: str | None = Field(default=None, max_length=32)
    cpf: str = Field(index=True, max_length=18)
    company: str | None = Field(default=None)
    document: str | None = Field(default=None, max_length=18)
    address: str | None = Field(default=None)
    zip_code: str | None = Field(default=None, max_length=10)
    city: str | None = Field(default=None)
    state: str | None = Field(default=None, max_length=2)

    asaas_customer_id: str | None = Field(default=None, max_length=64)
    status: str = Field(default=CustomerStatus.LEAD.value, index=True)
    value: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    partner_id: UUID | None = Field(default=None, foreign_key="partners.id", index=True)
