from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field, field_validator

from apontt.models.partner import PartnerStatus
from apontt.schemas.common import IDModel, Money, Timestamped
from apontt.utils.documents import only_digits


class PartnerBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    cpf: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    company: str | None = None
    cnpj: str | None = None
    region: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    address: str | None = None
    observations: str | None = None

    @field_validator("cpf")
    @classmethod
    def normalize_cpf(cls, value: str | None) -> str | None:
        if not value:
            return None
        digits = only_digits(value)
        if len(digits) != 11:
            raise ValueError("CPF must have 11 digits")
        return digits

    @field_validator("cnpj")
    @classmethod
    def normalize_cnpj(cls, value: str | None) -> str | None:
        if not value:
            return None
        digits = only_digits(value)
        if len(digits) != 14:
            raise ValueError("CNPJ must have 14 digits")
        return digits


class PartnerCreate(PartnerBase):
    status: PartnerStatus = PartnerStatus.ACTIVE
    admin_fee_rate: Money | None = None


class PartnerUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    whatsapp: str | None = None
    company: str | None = None
    region: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    address: str | None = None
    observations: str | None = None
    status: PartnerStatus | None = None


class PartnerRead(IDModel, Timestamped):
    name: str
    email: str
    cpf: str | None = None
    phone: str | None = None
    whatsapp: str | None = None
    company: str | None = None
    cnpj: str | None = None
    region: str | None = None
    city: str | None = None
    state: str | None = None
    address: str | None = None
    observations: str | None = None
    status: str
    admin_fee_rate: Decimal
    total_sales: Decimal
    total_commissions: Decimal
    access_enabled: bool
    dashboard_token: str | None = None
    last_access: datetime | None = None
    access_count: int
    last_activity: datetime | None = None


class PartnerCredentials(BaseModel):
    login: str
    password: str


class PartnerCreated(PartnerRead):
    generated_credentials: PartnerCredentials


class AdminFeeUpdate(BaseModel):
    admin_fee_rate: Money = Field(ge=0, le=100)


class AccessUpdate(BaseModel):
    access_enabled: bool


class DashboardLink(BaseModel):
    dashboard_token: str
    dashboard_url: str


class PartnerLoginRequest(BaseModel):
    email: EmailStr
    password: str


class PartnerStats(BaseModel):
    total_contracts: int
    signed_contracts: int
    total_customers: int
    total_sales: Decimal
    total_commissions: Decimal
