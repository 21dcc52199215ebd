from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from apontt.schemas.common import IDModel, Money, TaxId, Timestamped


class ContractCreate(BaseModel):
    client_name: str = Field(min_length=1)
    client_email: EmailStr | None = None
    client_phone: str | None = None
    client_document: TaxId
    type: str = "service"
    value: Money = Field(gt=0)
    description: str | None = None
    terms: str | None = None
    content: str | None = None
    template_type: str = "default"
    partner_id: UUID | None = None
    customer_id: UUID | None = None
    as_draft: bool = False


class ContractUpdate(BaseModel):
    client_name: str | None = Field(default=None, min_length=1)
    client_email: EmailStr | None = None
    client_phone: str | None = None
    client_document: TaxId | None = None
    type: str | None = None
    value: Money | None = Field(default=None, gt=0)
    description: str | None = None
    terms: str | None = None
    content: str | None = None
    template_type: str | None = None


class ContractValueUpdate(BaseModel):
    value: Money = Field(gt=0)


class ContractRead(IDModel, Timestamped):
    client_name: str
    client_email: str | None = None
    client_phone: str | None = None
    client_document: str
    type: str
    value: Decimal
    description: str | None = None
    terms: str | None = None
    content: str | None = None
    template_type: str
    status: str
    authorization_term_signed: bool
    authorization_term_id: UUID | None = None
    signer_name: str | None = None
    signed_at: datetime | None = None
    cancelled_at: datetime | None = None
    link_token: str | None = None
    link_expires_at: datetime | None = None
    signature_link: str | None = None
    partner_id: UUID | None = None
    partner_commission: Decimal | None = None
    customer_id: UUID | None = None


class AuthorizationTermCreate(BaseModel):
    client_name: str = Field(min_length=1)
    client_document: TaxId
    content: str | None = None
    partner_id: UUID | None = None


class AuthorizationTermRead(IDModel, Timestamped):
    client_name: str
    client_document: str
    content: str
    status: str
    signer_name: str | None = None
    signed_at: datetime | None = None
    link_token: str | None = None
    link_expires_at: datetime | None = None
    signature_link: str | None = None
    partner_id: UUID | None = None
    contract_id: UUID | None = None


class SignatureSubmission(BaseModel):
    """Corpo das rotas públicas de assinatura: `{signature, clientName}`."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    signature: str = Field(min_length=1, max_length=500)
    client_name: str = Field(
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("clientName", "client_name"),
    )


class SignatureLink(BaseModel):
    token: str
    url: str
    expires_at: datetime | None = None
    whatsapp_link: str | None = None


class PublicTermStatus(BaseModel):
    id: UUID
    status: str
    content: str
    signer_name: str | None = None
    signed_at: datetime | None = None


class PublicContractView(BaseModel):
    id: UUID
    client_name: str
    client_document: str
    type: str
    value: Decimal
    description: str | None = None
    content: str | None = None
    status: str
    authorization_term_signed: bool
    signer_name: str | None = None
    signed_at: datetime | None = None
    authorization_term: PublicTermStatus | None = None
