from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from apontt.models.customer import CustomerStatus
from apontt.schemas.common import IDModel, Money, TaxId, Timestamped


class CustomerBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr | None = None
    phone: str | None = None
    cpf: TaxId
    company: str | None = None
    document: str | None = None
    address: str | None = None
    zip_code: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    status: CustomerStatus = CustomerStatus.LEAD
    value: Money | None = None
    partner_id: UUID | None = None


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(BaseModel):
    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    cpf: TaxId | None = None
    company: str | None = None
    document: str | None = None
    address: str | None = None
    zip_code: str | None = None
    city: str | None = None
    state: str | None = Field(default=None, max_length=2)
    status: CustomerStatus | None = None
    value: Money | None = None
    partner_id: UUID | None = None


class CustomerRead(IDModel, Timestamped):
    name: str
    email: str | None = None
    phone: str | None = None
    cpf: str
    company: str | None = None
    document: str | None = None
    address: str | None = None
    zip_code: str | None = None
    city: str | None = None
    state: str | None = None
    asaas_customer_id: str | None = None
    status: str
    value: Decimal | None = None
    partner_id: UUID | None = None
    partner_name: str | None = None
    partner_email: str | None = None
