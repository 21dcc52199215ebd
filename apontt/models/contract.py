from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime
from sqlmodel import Field

from apontt.models.base import TimestampedModel, UUIDModel


class ContractStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    AWAITING_SIGNATURE = "awaiting_signature"
    SIGNED = "signed"
    CANCELLED = "cancelled"


TERMINAL_CONTRACT_STATUSES = (ContractStatus.SIGNED.value, ContractStatus.CANCELLED.value)
SIGNABLE_CONTRACT_STATUSES = (ContractStatus.PENDING.value, ContractStatus.AWAITING_SIGNATURE.value)


class AuthorizationTermStatus(str, Enum):
    PENDING = "pending"
    SIGNED = "signed"
    CANCELLED = "cancelled"


class AuthorizationTerm(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "authorization_terms"

    client_name: str
    client_document: str = Field(max_length=18)
    content: str

    status: str = Field(default=AuthorizationTermStatus.PENDING.value, index=True)
    client_signature: str | None = Field(default=None)
    signer_name: str | None = Field(default=None)
    client_ip_address: str | None = Field(default=None, max_length=64)
    signed_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))

    link_token: str | None = Field(default=None, unique=True, index=True, max_length=96)
    link_expires_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    signature_link: str | None = Field(default=None)

    partner_id: UUID | None = Field(default=None, foreign_key="partners.id", index=True)
    contract_id: UUID | None = Field(default=None, index=True)


class Contract(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "contracts"

    client_name: str = Field(index=True)
    client_email: str | None = Field(default=None)
    client_phone: str | None = Field(default=None, max_length=32)
    client_document: str = Field(max_length=18)
    type: str = Field(default="service")
    value: Decimal = Field(max_digits=12, decimal_places=2)
    description: str | None = Field(default=None)
    terms: str | None = Field(default=None)
    content: str | None = Field(default=None)
    template_type: str = Field(default="default")

    status: str = Field(default=ContractStatus.PENDING.value, index=True)
    authorization_term_signed: bool = Field(default=False)
    authorization_term_id: UUID | None = Field(default=None, foreign_key="authorization_terms.id")

    client_signature: str | None = Field(default=None)
    signer_name: str | None = Field(default=None)
    client_ip_address: str | None = Field(default=None, max_length=64)
    signed_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    cancelled_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))

    link_token: str | None = Field(default=None, unique=True, index=True, max_length=96)
    link_expires_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    signature_link: str | None = Field(default=None)

    partner_id: UUID | None = Field(default=None, foreign_key="partners.id", index=True)
    partner_commission: Decimal | None = Field(default=None, max_digits=12, decimal_places=2)
    customer_id: UUID | None = Field(default=None, foreign_key="customers.id", index=True)
