from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from apontt.models.payment import BillingType
from apontt.schemas.common import IDModel, Money, TaxId, Timestamped


class ChargeCreate(BaseModel):
    """Pedido de cobrança avulsa; aceita os nomes de campo do formulário web."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    billing_type: BillingType = Field(
        default=BillingType.PIX,
        validation_alias=AliasChoices("billingType", "billing_type"),
    )
    value: Money = Field(gt=0)
    due_date: date = Field(validation_alias=AliasChoices("dueDate", "due_date"))
    description: str | None = None
    customer_name: str = Field(
        min_length=1,
        validation_alias=AliasChoices("customerName", "customer_name", "name"),
    )
    customer_email: EmailStr | None = Field(
        default=None,
        validation_alias=AliasChoices("customerEmail", "customer_email", "email"),
    )
    customer_phone: str | None = Field(
        default=None,
        validation_alias=AliasChoices("customerPhone", "customer_phone", "phone"),
    )
    customer_document: TaxId = Field(
        validation_alias=AliasChoices("customerDocument", "customer_document", "cpf", "cpfCnpj"),
    )
    contract_id: UUID | None = Field(
        default=None,
        validation_alias=AliasChoices("contractId", "contract_id"),
    )


class ContractChargeRequest(BaseModel):
    billing_type: BillingType = BillingType.PIX


class PaymentRead(IDModel, Timestamped):
    external_id: str
    customer_name: str
    customer_email: str | None = None
    customer_phone: str | None = None
    customer_document: str
    value: Decimal
    due_date: date
    description: str | None = None
    billing_type: str
    status: str
    invoice_url: str | None = None
    bank_slip_url: str | None = None
    pix_code: str | None = None
    is_simulation: bool
    contract_id: UUID | None = None
    whatsapp_link: str | None = None


class ProviderStatus(BaseModel):
    provider: str
    simulation: bool
    connected: bool
    environment: str | None = None
    account_name: str | None = None
    message: str | None = None
