from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.models.partner import Partner
from apontt.models.user import User
from apontt.schemas.partner import (
    AccessUpdate,
    AdminFeeUpdate,
    DashboardLink,
    PartnerCreate,
    PartnerCreated,
    PartnerCredentials,
    PartnerLoginRequest,
    PartnerRead,
    PartnerUpdate,
)
from apontt.services.partners import PartnerService

router = APIRouter(prefix="/partners", tags=["partners"])


def _service(session: Session) -> PartnerService:
    return PartnerService(session)


def _serialize_partner(partner: Partner) -> PartnerRead:
    return PartnerRead.model_validate(partner)


class PartnerLoginResult(BaseModel):
    valid: bool
    message: str
    partner: PartnerRead | None = None


@router.get("", response_model=List[PartnerRead])
def list_partners(
    status_filter: str | None = Query(default=None, alias="status"),
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[PartnerRead]:
    return [_serialize_partner(partner) for partner in _service(session).list_partners(status_filter)]


@router.post("", response_model=PartnerCreated, status_code=status.HTTP_201_CREATED)
def create_partner(
    payload: PartnerCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PartnerCreated:
    partner, password = _service(session).create_partner(payload)
    read = _serialize_partner(partner)
    return PartnerCreated(
        **read.model_dump(),
        generated_credentials=PartnerCredentials(login=partner.email, password=password),
    )


@router.post("/validate-login", response_model=PartnerLoginResult)
def validate_login(payload: PartnerLoginRequest, session: Session = Depends(get_db)) -> PartnerLoginResult:
    partner, message = _service(session).validate_login(payload.email, payload.password)
    return PartnerLoginResult(
        valid=partner is not None,
        message=message,
        partner=_serialize_partner(partner) if partner else None,
    )


@router.get("/{partner_id}", response_model=PartnerRead)
def get_partner(
    partner_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PartnerRead:
    return _serialize_partner(_service(session).get_partner(partner_id))


@router.put("/{partner_id}", response_model=PartnerRead)
def update_partner(
    partner_id: UUID,
    payload: PartnerUpdate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PartnerRead:
    return _serialize_partner(_service(session).update_partner(partner_id, payload))


@router.delete("/{partner_id}", response_model=PartnerRead)
def deactivate_partner(
    partner_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PartnerRead:
    return _serialize_partner(_service(session).deactivate(partner_id))


@router.patch("/{partner_id}/admin-fee", response_model=PartnerRead)
def update_admin_fee(
    partner_id: UUID,
    payload: AdminFeeUpdate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PartnerRead:
    return _serialize_partner(_service(session).update_admin_fee(partner_id, payload.admin_fee_rate))


@router.post("/{partner_id}/generate-dashboard-token", response_model=DashboardLink)
def generate_dashboard_token(
    partner_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DashboardLink:
    link = _service(session).generate_dashboard_token(partner_id)
    return DashboardLink(dashboard_token=link.token, dashboard_url=link.url)


@router.patch("/{partner_id}/access", response_model=PartnerRead)
def update_access(
    partner_id: UUID,
    payload: AccessUpdate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PartnerRead:
    return _serialize_partner(_service(session).set_access(partner_id, payload.access_enabled))
