from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.api.routes.payments import serialize_payment
from apontt.core.exceptions import ValidationError
from apontt.models.contract import ContractStatus
from apontt.models.user import User
from apontt.schemas.contract import (
    ContractCreate,
    ContractRead,
    ContractUpdate,
    ContractValueUpdate,
    SignatureLink,
)
from apontt.schemas.payment import ContractChargeRequest, PaymentRead
from apontt.services.contracts import ContractService
from apontt.services.notifications import build_whatsapp_link, signature_message
from apontt.services.payments import PaymentService

router = APIRouter(prefix="/contracts", tags=["contracts"])


def _service(session: Session) -> ContractService:
    return ContractService(session)


@router.get("", response_model=List[ContractRead])
def list_contracts(
    status_filter: ContractStatus | None = Query(default=None, alias="status"),
    partner_id: UUID | None = None,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[ContractRead]:
    contracts = _service(session).list_contracts(status=status_filter, partner_id=partner_id)
    return [ContractRead.model_validate(contract) for contract in contracts]


@router.post("", response_model=ContractRead, status_code=status.HTTP_201_CREATED)
def create_contract(
    payload: ContractCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ContractRead:
    contract = _service(session).create_contract(payload)
    return ContractRead.model_validate(contract)


@router.get("/{contract_id}", response_model=ContractRead)
def get_contract(
    contract_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ContractRead:
    return ContractRead.model_validate(_service(session).get_contract(contract_id))


@router.put("/{contract_id}", response_model=ContractRead)
def update_contract(
    contract_id: UUID,
    payload: ContractUpdate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ContractRead:
    return ContractRead.model_validate(_service(session).update_contract(contract_id, payload))


@router.patch("/{contract_id}/value", response_model=ContractRead)
def update_contract_value(
    contract_id: UUID,
    payload: ContractValueUpdate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ContractRead:
    return ContractRead.model_validate(_service(session).update_value(contract_id, payload.value))


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract(
    contract_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    _service(session).delete_contract(contract_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{contract_id}/submit", response_model=ContractRead)
def submit_contract(
    contract_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ContractRead:
    return ContractRead.model_validate(_service(session).submit(contract_id))


@router.post("/{contract_id}/signature-link", response_model=SignatureLink)
def issue_signature_link(
    contract_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SignatureLink:
    service = _service(session)
    link = service.issue_signature_link(contract_id)
    contract = service.get_contract(contract_id)
    whatsapp_link = None
    if contract.client_phone:
        try:
            whatsapp_link = build_whatsapp_link(
                contract.client_phone,
                signature_message(contract.client_name, link.url),
            )
        except ValidationError:
            whatsapp_link = None
    return SignatureLink(token=link.token, url=link.url, expires_at=link.expires_at, whatsapp_link=whatsapp_link)


@router.post("/{contract_id}/cancel", response_model=ContractRead)
def cancel_contract(
    contract_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ContractRead:
    return ContractRead.model_validate(_service(session).cancel(contract_id))


@router.post("/{contract_id}/generate-payment", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def generate_contract_payment(
    contract_id: UUID,
    payload: ContractChargeRequest | None = None,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PaymentRead:
    billing_type = (payload or ContractChargeRequest()).billing_type.value
    payment = PaymentService(session).create_contract_charge(contract_id, billing_type)
    return serialize_payment(payment)
