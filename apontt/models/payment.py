from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlmodel import Field

from apontt.models.base import TimestampedModel, UUIDModel


class BillingType(str, Enum):
    PIX = "PIX"
    BOLETO = "BOLETO"
    CREDIT_CARD = "CREDIT_CARD"
    UNDEFINED = "UNDEFINED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    CONFIRMED = "CONFIRMED"
    OVERDUE = "OVERDUE"
    REFUNDED = "REFUNDED"


PAID_PAYMENT_STATUSES = (PaymentStatus.RECEIVED.value, PaymentStatus.CONFIRMED.value)


class Payment(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "payments"

    external_id: str = Field(unique=True, index=True, max_length=64)
    customer_name: str
    customer_email: str | None = Field(default=None)
    customer_phone: str | None = Field(default=None, max_length=32)
    customer_document: str = Field(index=True, max_length=18)

    value: Decimal = Field(max_digits=12, decimal_places=2)
    due_date: date
    description: str | None = Field(default=None)
    billing_type: str = Field(default=BillingType.PIX.value)
    # Provider-defined; PaymentStatus lists the values we aggregate on.
    status: str = Field(default=PaymentStatus.PENDING.value, index=True)

    invoice_url: str | None = Field(default=None)
    bank_slip_url: str | None = Field(default=None)
    pix_code: str | None = Field(default=None)
    is_simulation: bool = Field(default=False)

    contract_id: UUID | None = Field(default=None, foreign_key="contracts.id", index=True)
