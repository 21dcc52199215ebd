from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from apontt.core.exceptions import (
    AlreadySignedError,
    AuthorizationRequiredError,
    ConflictError,
    NotFoundError,
)
from apontt.core.logging_setup import logger, sanitize_for_log
from apontt.models.base import utcnow
from apontt.models.contract import (
    SIGNABLE_CONTRACT_STATUSES,
    TERMINAL_CONTRACT_STATUSES,
    AuthorizationTerm,
    AuthorizationTermStatus,
    Contract,
    ContractStatus,
)
from apontt.models.customer import Customer
from apontt.models.partner import Partner
from apontt.models.payment import Payment
from apontt.schemas.contract import AuthorizationTermCreate, ContractCreate, ContractUpdate
from apontt.services.activity import ActivityService
from apontt.services.documents import DocumentRenderer
from apontt.services.links import IssuedLink, LinkIssuer
from apontt.utils.documents import CENTS


@dataclass
class SignatureInput:
    signer_name: str
    signature: str
    signer_ip: str | None = None


def compute_commission(value: Decimal, rate: Decimal) -> Decimal:
    return (value * rate / Decimal("100")).quantize(CENTS)


def _mark_term_signed(session: Session, term_id: UUID, signature: SignatureInput, signed_at: datetime) -> bool:
    """Compare-and-set pending -> signed; False when another request already signed the term."""
    result = session.connection().execute(
        update(AuthorizationTerm)
        .where(AuthorizationTerm.id == term_id)
        .where(AuthorizationTerm.status == AuthorizationTermStatus.PENDING.value)
        .values(
            status=AuthorizationTermStatus.SIGNED.value,
            client_signature=signature.signature,
            signer_name=signature.signer_name,
            client_ip_address=signature.signer_ip,
            signed_at=signed_at,
            updated_at=signed_at,
        )
    )
    return result.rowcount == 1


def _mark_contract_authorized(session: Session, contract_id: UUID, when: datetime) -> None:
    session.connection().execute(
        update(Contract)
        .where(Contract.id == contract_id)
        .values(authorization_term_signed=True, updated_at=when)
    )


class ContractService:
    def __init__(
        self,
        session: Session,
        *,
        links: LinkIssuer | None = None,
        renderer: DocumentRenderer | None = None,
    ) -> None:
        self.session = session
        self.links = links or LinkIssuer(session)
        self.renderer = renderer or DocumentRenderer()
        self.activities = ActivityService(session)

    # Consultas ---------------------------------------------------------------
    def list_contracts(
        self,
        status: ContractStatus | str | None = None,
        partner_id: UUID | None = None,
    ) -> list[Contract]:
        statement = select(Contract)
        if status:
            value = status.value if isinstance(status, ContractStatus) else status
            statement = statement.where(Contract.status == value)
        if partner_id:
            statement = statement.where(Contract.partner_id == partner_id)
        statement = statement.order_by(Contract.created_at.desc())
        return list(self.session.exec(statement).all())

    def get_contract(self, contract_id: str | UUID) -> Contract:
        contract = self.session.get(Contract, UUID(str(contract_id)))
        if not contract:
            raise NotFoundError("Contract not found")
        return contract

    def get_term(self, contract: Contract) -> AuthorizationTerm | None:
        if not contract.authorization_term_id:
            return None
        return self.session.get(AuthorizationTerm, contract.authorization_term_id)

    def get_public_view(self, token: str) -> tuple[Contract, AuthorizationTerm | None]:
        """Resolve o link público; o contrato continua visível depois de assinado."""
        contract = self.links.resolve_contract(token)
        return contract, self.get_term(contract)

    # Criação e edição ------------------------------------------------------------
    def create_contract(self, payload: ContractCreate, *, issue_link: bool = True) -> Contract:
        commission: Decimal | None = None
        if payload.partner_id:
            partner = self.session.get(Partner, payload.partner_id)
            if not partner:
                raise NotFoundError("Partner not found")
            commission = compute_commission(payload.value, partner.admin_fee_rate)
        if payload.customer_id and not self.session.get(Customer, payload.customer_id):
            raise NotFoundError("Customer not found")

        term = AuthorizationTerm(
            client_name=payload.client_name,
            client_document=payload.client_document,
            content=self.renderer.render_authorization_term(
                client_name=payload.client_name,
                client_document=payload.client_document,
            ),
            partner_id=payload.partner_id,
        )
        self.session.add(term)
        self.session.flush()

        content = payload.content or self.renderer.render_contract(
            client_name=payload.client_name,
            client_document=payload.client_document,
            value=payload.value,
            contract_type=payload.type,
            description=payload.description,
            terms=payload.terms,
            client_email=payload.client_email,
            client_phone=payload.client_phone,
        )
        contract = Contract(
            client_name=payload.client_name,
            client_email=payload.client_email,
            client_phone=payload.client_phone,
            client_document=payload.client_document,
            type=payload.type,
            value=payload.value,
            description=payload.description,
            terms=payload.terms,
            content=content,
            template_type=payload.template_type,
            status=ContractStatus.DRAFT.value if payload.as_draft else ContractStatus.PENDING.value,
            authorization_term_signed=False,
            authorization_term_id=term.id,
            partner_id=payload.partner_id,
            partner_commission=commission,
            customer_id=payload.customer_id,
        )
        self.session.add(contract)
        self.session.flush()
        term.contract_id = contract.id
        self.session.add(term)

        if issue_link and not payload.as_draft:
            self.links.issue_for_contract(contract)
            contract.status = ContractStatus.AWAITING_SIGNATURE.value

        self.activities.record(
            "contract_created",
            f"Contrato criado para {contract.client_name}",
            value=contract.value,
            related_id=contract.id,
            commit=False,
        )
        self._commit()
        self.session.refresh(contract)
        logger.info("Contrato %s criado (status=%s)", contract.id, contract.status)
        return contract

    def update_contract(self, contract_id: str | UUID, payload: ContractUpdate) -> Contract:
        contract = self.get_contract(contract_id)
        if contract.status in TERMINAL_CONTRACT_STATUSES:
            raise ConflictError(f"Contract is {contract.status} and can no longer be edited")

        update_data = payload.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field in {"client_name", "client_document", "value", "type", "template_type"}:
                continue
            setattr(contract, field, value)

        if "value" in update_data and contract.partner_id:
            partner = self.session.get(Partner, contract.partner_id)
            if partner:
                contract.partner_commission = compute_commission(contract.value, partner.admin_fee_rate)

        contract.touch()
        self.session.add(contract)
        self._commit()
        self.session.refresh(contract)
        return contract

    def update_value(self, contract_id: str | UUID, value: Decimal) -> Contract:
        return self.update_contract(contract_id, ContractUpdate(value=value))

    def delete_contract(self, contract_id: str | UUID) -> None:
        contract = self.get_contract(contract_id)
        payments = self.session.exec(select(Payment).where(Payment.contract_id == contract.id)).all()
        for payment in payments:
            payment.contract_id = None
            self.session.add(payment)
        term = self.get_term(contract)
        contract_ref, client_name = contract.id, contract.client_name
        self.session.delete(contract)
        self.session.flush()
        if term:
            self.session.delete(term)
        self.activities.record(
            "contract_deleted",
            f"Contrato de {client_name} removido",
            related_id=contract_ref,
            commit=False,
        )
        self._commit()

    # Transições ------------------------------------------------------------------
    def submit(self, contract_id: str | UUID) -> Contract:
        contract = self.get_contract(contract_id)
        if contract.status != ContractStatus.DRAFT.value:
            raise ConflictError("Only draft contracts can be submitted")
        contract.status = ContractStatus.PENDING.value
        self.links.issue_for_contract(contract)
        contract.status = ContractStatus.AWAITING_SIGNATURE.value
        contract.touch()
        self.activities.record(
            "contract_submitted",
            f"Contrato de {contract.client_name} enviado para assinatura",
            related_id=contract.id,
            commit=False,
        )
        self._commit()
        self.session.refresh(contract)
        return contract

    def issue_signature_link(self, contract_id: str | UUID) -> IssuedLink:
        contract = self.get_contract(contract_id)
        if contract.status not in SIGNABLE_CONTRACT_STATUSES:
            raise ConflictError(f"Cannot issue a signature link for a {contract.status} contract")
        link = self.links.issue_for_contract(contract)
        contract.status = ContractStatus.AWAITING_SIGNATURE.value
        contract.touch()
        self._commit()
        return link

    def cancel(self, contract_id: str | UUID) -> Contract:
        contract = self.get_contract(contract_id)
        now = utcnow()
        result = self.session.connection().execute(
            update(Contract)
            .where(Contract.id == contract.id)
            .where(Contract.status.notin_(TERMINAL_CONTRACT_STATUSES))
            .values(status=ContractStatus.CANCELLED.value, cancelled_at=now, updated_at=now)
        )
        if result.rowcount != 1:
            self.session.rollback()
            self.session.refresh(contract)
            raise ConflictError(f"Contract is {contract.status} and cannot be cancelled")

        if contract.authorization_term_id:
            self.session.connection().execute(
                update(AuthorizationTerm)
                .where(AuthorizationTerm.id == contract.authorization_term_id)
                .where(AuthorizationTerm.status == AuthorizationTermStatus.PENDING.value)
                .values(status=AuthorizationTermStatus.CANCELLED.value, updated_at=now)
            )
        self.activities.record(
            "contract_cancelled",
            f"Contrato de {contract.client_name} cancelado",
            related_id=contract.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(contract)
        return contract

    # Assinaturas públicas ----------------------------------------------------------
    def sign_authorization(self, token: str, signature: SignatureInput) -> Contract:
        contract = self.links.resolve_contract(token)
        if contract.status == ContractStatus.CANCELLED.value:
            raise ConflictError("Contract was cancelled")
        term = self.get_term(contract)
        if term is None:
            raise NotFoundError("Authorization term not found")
        if contract.authorization_term_signed or term.status == AuthorizationTermStatus.SIGNED.value:
            raise AlreadySignedError("Authorization term already signed")

        now = utcnow()
        if not _mark_term_signed(self.session, term.id, signature, now):
            self.session.rollback()
            raise AlreadySignedError("Authorization term already signed")
        _mark_contract_authorized(self.session, contract.id, now)
        self.activities.record(
            "authorization_signed",
            f"Termo de autorização assinado por {signature.signer_name}",
            related_id=contract.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(contract)
        logger.info(
            "Termo do contrato %s assinado por %s",
            contract.id,
            sanitize_for_log(signature.signer_name),
        )
        return contract

    def sign_contract(self, token: str, signature: SignatureInput) -> Contract:
        contract = self.links.resolve_contract(token)
        if contract.status == ContractStatus.CANCELLED.value:
            raise ConflictError("Contract was cancelled")
        if contract.status == ContractStatus.SIGNED.value:
            raise AlreadySignedError("Contract already signed")
        if not contract.authorization_term_signed:
            raise AuthorizationRequiredError("The authorization term must be signed before the contract")
        if contract.status not in SIGNABLE_CONTRACT_STATUSES:
            raise ConflictError("Contract has not been submitted for signature")

        now = utcnow()
        result = self.session.connection().execute(
            update(Contract)
            .where(Contract.id == contract.id)
            .where(Contract.status.in_(SIGNABLE_CONTRACT_STATUSES))
            .where(Contract.authorization_term_signed.is_(True))
            .values(
                status=ContractStatus.SIGNED.value,
                client_signature=signature.signature,
                signer_name=signature.signer_name,
                client_ip_address=signature.signer_ip,
                signed_at=now,
                updated_at=now,
            )
        )
        if result.rowcount != 1:
            self.session.rollback()
            self.session.refresh(contract)
            if contract.status == ContractStatus.SIGNED.value:
                raise AlreadySignedError("Contract already signed")
            raise ConflictError("Contract status changed while signing")

        if contract.partner_id:
            # incremento atômico no próprio UPDATE
            self.session.connection().execute(
                update(Partner)
                .where(Partner.id == contract.partner_id)
                .values(
                    total_sales=func.coalesce(Partner.total_sales, 0) + contract.value,
                    total_commissions=func.coalesce(Partner.total_commissions, 0)
                    + (contract.partner_commission or Decimal("0")),
                    last_activity=now,
                    updated_at=now,
                )
            )
        self.activities.record(
            "contract_signed",
            f"Contrato assinado por {signature.signer_name}",
            value=contract.value,
            related_id=contract.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(contract)
        logger.info("Contrato %s assinado", contract.id)
        return contract

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("Could not save contract: unique constraint violated") from exc


class AuthorizationTermService:
    """Termos de autorização avulsos, com link público próprio."""

    def __init__(
        self,
        session: Session,
        *,
        links: LinkIssuer | None = None,
        renderer: DocumentRenderer | None = None,
    ) -> None:
        self.session = session
        self.links = links or LinkIssuer(session)
        self.renderer = renderer or DocumentRenderer()
        self.activities = ActivityService(session)

    def list_terms(self, status: str | None = None) -> list[AuthorizationTerm]:
        statement = select(AuthorizationTerm)
        if status:
            statement = statement.where(AuthorizationTerm.status == status)
        return list(self.session.exec(statement.order_by(AuthorizationTerm.created_at.desc())).all())

    def create_term(self, payload: AuthorizationTermCreate) -> AuthorizationTerm:
        if payload.partner_id and not self.session.get(Partner, payload.partner_id):
            raise NotFoundError("Partner not found")
        term = AuthorizationTerm(
            client_name=payload.client_name,
            client_document=payload.client_document,
            content=payload.content
            or self.renderer.render_authorization_term(
                client_name=payload.client_name,
                client_document=payload.client_document,
            ),
            partner_id=payload.partner_id,
        )
        self.session.add(term)
        self.links.issue_for_term(term)
        self.activities.record(
            "authorization_term_created",
            f"Termo de autorização criado para {term.client_name}",
            related_id=term.id,
            commit=False,
        )
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("Could not save authorization term") from exc
        self.session.refresh(term)
        return term

    def get_public_term(self, token: str) -> AuthorizationTerm:
        return self.links.resolve_term(token)

    def sign_term(self, token: str, signature: SignatureInput) -> AuthorizationTerm:
        term = self.links.resolve_term(token)
        if term.status == AuthorizationTermStatus.SIGNED.value:
            raise AlreadySignedError("Authorization term already signed")
        if term.status == AuthorizationTermStatus.CANCELLED.value:
            raise ConflictError("Authorization term was cancelled")

        now = utcnow()
        if not _mark_term_signed(self.session, term.id, signature, now):
            self.session.rollback()
            raise AlreadySignedError("Authorization term already signed")
        if term.contract_id:
            _mark_contract_authorized(self.session, term.contract_id, now)
        self.activities.record(
            "authorization_signed",
            f"Termo de autorização assinado por {signature.signer_name}",
            related_id=term.contract_id or term.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(term)
        return term
