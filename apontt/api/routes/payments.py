from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.core.exceptions import ValidationError
from apontt.models.payment import Payment
from apontt.models.user import User
from apontt.schemas.payment import ChargeCreate, PaymentRead, ProviderStatus
from apontt.services.notifications import build_whatsapp_link, payment_message
from apontt.services.payment_provider import ChargeRequest
from apontt.services.payments import PaymentService

router = APIRouter(tags=["payments"])


def _service(session: Session) -> PaymentService:
    return PaymentService(session)


def serialize_payment(payment: Payment) -> PaymentRead:
    read = PaymentRead.model_validate(payment)
    if not payment.customer_phone:
        return read
    try:
        link = build_whatsapp_link(
            payment.customer_phone,
            payment_message(payment.customer_name, payment.value, payment.invoice_url),
        )
    except ValidationError:
        return read
    return read.model_copy(update={"whatsapp_link": link})


@router.post("/payments/asaas", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def create_asaas_payment(
    payload: ChargeCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PaymentRead:
    request = ChargeRequest(
        billing_type=payload.billing_type.value,
        value=payload.value,
        due_date=payload.due_date,
        description=payload.description,
        customer_name=payload.customer_name,
        customer_document=payload.customer_document,
        customer_email=payload.customer_email,
        customer_phone=payload.customer_phone,
    )
    payment = _service(session).create_charge(request, contract_id=payload.contract_id)
    return serialize_payment(payment)


@router.get("/payments/provider-status", response_model=ProviderStatus)
def provider_status(
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ProviderStatus:
    return ProviderStatus(**_service(session).provider_status())


@router.get("/wallet/payments", response_model=List[PaymentRead])
def list_wallet_payments(
    status_filter: str | None = Query(default=None, alias="status"),
    customer_document: str | None = None,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[PaymentRead]:
    payments = _service(session).list_payments(status=status_filter, customer_document=customer_document)
    return [serialize_payment(payment) for payment in payments]


@router.get("/wallet/payments/{payment_id}", response_model=PaymentRead)
def get_wallet_payment(
    payment_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PaymentRead:
    return serialize_payment(_service(session).get_payment(payment_id))


@router.post("/wallet/payments/{payment_id}/refresh", response_model=PaymentRead)
def refresh_wallet_payment(
    payment_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PaymentRead:
    return serialize_payment(_service(session).refresh_status(payment_id))


@router.delete("/wallet/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_wallet_payment(
    payment_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    _service(session).delete_payment(payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
