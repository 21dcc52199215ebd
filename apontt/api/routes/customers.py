from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.models.customer import Customer, CustomerStatus
from apontt.models.partner import Partner
from apontt.models.user import User
from apontt.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from apontt.services.customers import CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])


def _service(session: Session) -> CustomerService:
    return CustomerService(session)


def _serialize_customer(customer: Customer, partner: Partner | None = None) -> CustomerRead:
    read = CustomerRead.model_validate(customer, from_attributes=True)
    if partner is None:
        return read
    return read.model_copy(update={"partner_name": partner.name, "partner_email": partner.email})


@router.get("", response_model=List[CustomerRead])
def list_customers(
    status_filter: CustomerStatus | None = Query(default=None, alias="status"),
    partner_id: UUID | None = None,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[CustomerRead]:
    rows = _service(session).list_customers(
        status=status_filter.value if status_filter else None,
        partner_id=partner_id,
    )
    return [_serialize_customer(customer, partner) for customer, partner in rows]


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CustomerRead:
    service = _service(session)
    customer = service.create_customer(payload)
    return _serialize_customer(customer, service.get_partner(customer))


@router.get("/{customer_id}", response_model=CustomerRead)
def get_customer(
    customer_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CustomerRead:
    service = _service(session)
    customer = service.get_customer(customer_id)
    return _serialize_customer(customer, service.get_partner(customer))


@router.put("/{customer_id}", response_model=CustomerRead)
def update_customer(
    customer_id: UUID,
    payload: CustomerUpdate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CustomerRead:
    service = _service(session)
    customer = service.update_customer(customer_id, payload)
    return _serialize_customer(customer, service.get_partner(customer))


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    _service(session).delete_customer(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
