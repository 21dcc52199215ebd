"""Rotas públicas acessadas pelo link enviado ao cliente ou ao parceiro (sem login)."""

from __future__ import annotations

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlmodel import Session

from apontt.api.deps import get_client_ip, get_db
from apontt.models.contract import AuthorizationTerm, Contract
from apontt.schemas.contract import (
    AuthorizationTermRead,
    ContractRead,
    PublicContractView,
    PublicTermStatus,
    SignatureSubmission,
)
from apontt.schemas.customer import CustomerRead
from apontt.schemas.partner import PartnerRead, PartnerStats
from apontt.services.contracts import AuthorizationTermService, ContractService, SignatureInput
from apontt.services.partners import PartnerService

router = APIRouter(prefix="/public", tags=["public"])


class PublicPartnerDashboard(BaseModel):
    partner: PartnerRead
    contracts: List[ContractRead]
    customers: List[CustomerRead]
    stats: PartnerStats


def _public_view(contract: Contract, term: AuthorizationTerm | None) -> PublicContractView:
    term_view = None
    if term is not None:
        term_view = PublicTermStatus(
            id=term.id,
            status=term.status,
            content=term.content,
            signer_name=term.signer_name,
            signed_at=term.signed_at,
        )
    return PublicContractView(
        id=contract.id,
        client_name=contract.client_name,
        client_document=contract.client_document,
        type=contract.type,
        value=Decimal(contract.value),
        description=contract.description,
        content=contract.content,
        status=contract.status,
        authorization_term_signed=contract.authorization_term_signed,
        signer_name=contract.signer_name,
        signed_at=contract.signed_at,
        authorization_term=term_view,
    )


def _signature(payload: SignatureSubmission, request: Request) -> SignatureInput:
    return SignatureInput(
        signer_name=payload.client_name.strip(),
        signature=payload.signature.strip(),
        signer_ip=get_client_ip(request),
    )


@router.get("/contract/{token}", response_model=PublicContractView)
def get_public_contract(token: str, session: Session = Depends(get_db)) -> PublicContractView:
    service = ContractService(session)
    contract, term = service.get_public_view(token)
    return _public_view(contract, term)


@router.post("/contract/{token}/sign-authorization", response_model=PublicContractView)
def sign_authorization(
    token: str,
    payload: SignatureSubmission,
    request: Request,
    session: Session = Depends(get_db),
) -> PublicContractView:
    service = ContractService(session)
    contract = service.sign_authorization(token, _signature(payload, request))
    return _public_view(contract, service.get_term(contract))


@router.post("/contract/{token}/sign", response_model=PublicContractView)
def sign_contract(
    token: str,
    payload: SignatureSubmission,
    request: Request,
    session: Session = Depends(get_db),
) -> PublicContractView:
    service = ContractService(session)
    contract = service.sign_contract(token, _signature(payload, request))
    return _public_view(contract, service.get_term(contract))


@router.get("/authorization-term/{token}", response_model=AuthorizationTermRead)
def get_public_term(token: str, session: Session = Depends(get_db)) -> AuthorizationTermRead:
    term = AuthorizationTermService(session).get_public_term(token)
    return AuthorizationTermRead.model_validate(term)


@router.post("/authorization-term/{token}/sign", response_model=AuthorizationTermRead)
def sign_public_term(
    token: str,
    payload: SignatureSubmission,
    request: Request,
    session: Session = Depends(get_db),
) -> AuthorizationTermRead:
    term = AuthorizationTermService(session).sign_term(token, _signature(payload, request))
    return AuthorizationTermRead.model_validate(term)


@router.get("/partner/{token}", response_model=PublicPartnerDashboard)
def get_partner_dashboard(token: str, session: Session = Depends(get_db)) -> PublicPartnerDashboard:
    dashboard = PartnerService(session).open_dashboard(token)
    return PublicPartnerDashboard(
        partner=PartnerRead.model_validate(dashboard.partner),
        contracts=[ContractRead.model_validate(contract) for contract in dashboard.contracts],
        customers=[CustomerRead.model_validate(customer) for customer in dashboard.customers],
        stats=PartnerStats(**dashboard.stats),
    )
