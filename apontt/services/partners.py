from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from apontt.core.config import settings
from apontt.core.exceptions import AccessDeniedError, ConflictError, NotFoundError, ValidationError
from apontt.core.logging_setup import sanitize_for_log
from apontt.models.base import utcnow
from apontt.models.contract import Contract
from apontt.models.customer import Customer
from apontt.models.partner import Partner, PartnerStatus
from apontt.schemas.partner import PartnerCreate, PartnerUpdate
from apontt.services.activity import ActivityService
from apontt.services.links import IssuedLink, LinkIssuer
from apontt.services.reporting import ReportingService
from apontt.utils.security import generate_secure_password, get_password_hash, verify_password

ACCESS_LOG_LIMIT = 50


@dataclass
class PartnerDashboard:
    partner: Partner
    contracts: list[Contract]
    customers: list[Customer]
    stats: dict[str, object]


class PartnerService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.activities = ActivityService(session)

    def list_partners(self, status: str | None = None) -> list[Partner]:
        statement = select(Partner)
        if status:
            statement = statement.where(Partner.status == status)
        return list(self.session.exec(statement.order_by(Partner.created_at.desc())).all())

    def get_partner(self, partner_id: str | UUID) -> Partner:
        partner = self.session.get(Partner, UUID(str(partner_id)))
        if not partner:
            raise NotFoundError("Partner not found")
        return partner

    def get_by_email(self, email: str) -> Partner | None:
        statement = select(Partner).where(func.lower(Partner.email) == (email or "").strip().lower())
        return self.session.exec(statement).first()

    def create_partner(self, payload: PartnerCreate) -> tuple[Partner, str]:
        """Cria o parceiro e devolve a senha gerada (exibida uma única vez)."""
        if self.get_by_email(payload.email):
            raise ConflictError("Partner with this e-mail already exists")
        password = generate_secure_password()
        data = payload.model_dump(exclude={"admin_fee_rate", "status", "email"})
        partner = Partner(
            **data,
            email=payload.email.lower(),
            status=payload.status.value,
            admin_fee_rate=payload.admin_fee_rate if payload.admin_fee_rate is not None else settings.default_admin_fee_rate,
            password_hash=get_password_hash(password),
        )
        self.session.add(partner)
        self.activities.record(
            "partner_created",
            f"Parceiro {partner.name} cadastrado",
            related_id=partner.id,
            commit=False,
        )
        self._commit()
        self.session.refresh(partner)
        return partner, password

    def update_partner(self, partner_id: str | UUID, payload: PartnerUpdate) -> Partner:
        partner = self.get_partner(partner_id)
        update_data = payload.model_dump(exclude_unset=True)
        if update_data.get("email"):
            existing = self.get_by_email(update_data["email"])
            if existing and existing.id != partner.id:
                raise ConflictError("Partner with this e-mail already exists")
            update_data["email"] = update_data["email"].lower()
        if update_data.get("status") is not None:
            update_data["status"] = PartnerStatus(update_data["status"]).value
        for field, value in update_data.items():
            if value is None and field in {"name", "email", "status"}:
                continue
            setattr(partner, field, value)
        partner.touch()
        self.session.add(partner)
        self._commit()
        self.session.refresh(partner)
        return partner

    def deactivate(self, partner_id: str | UUID) -> Partner:
        """Parceiros nunca são removidos: ficam inativos e sem acesso ao painel."""
        partner = self.get_partner(partner_id)
        partner.status = PartnerStatus.INACTIVE.value
        partner.access_enabled = False
        partner.touch()
        self.session.add(partner)
        self.activities.record(
            "partner_deactivated",
            f"Parceiro {partner.name} desativado",
            related_id=partner.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(partner)
        return partner

    def update_admin_fee(self, partner_id: str | UUID, rate: Decimal) -> Partner:
        if rate < 0 or rate > 100:
            raise ValidationError.for_field("admin_fee_rate", "Taxa deve estar entre 0 e 100")
        partner = self.get_partner(partner_id)
        partner.admin_fee_rate = rate
        partner.touch()
        self.session.add(partner)
        self.activities.record(
            "partner_fee_updated",
            f"Taxa administrativa de {partner.name} alterada para {rate}%",
            related_id=partner.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(partner)
        return partner

    def generate_dashboard_token(self, partner_id: str | UUID, links: LinkIssuer | None = None) -> IssuedLink:
        partner = self.get_partner(partner_id)
        issuer = links or LinkIssuer(self.session)
        link = issuer.issue_for_partner(partner)
        partner.access_enabled = True
        partner.touch()
        self._commit()
        return link

    def set_access(self, partner_id: str | UUID, enabled: bool) -> Partner:
        partner = self.get_partner(partner_id)
        partner.access_enabled = enabled
        partner.touch()
        self.session.add(partner)
        self.session.commit()
        self.session.refresh(partner)
        return partner

    def validate_login(self, email: str, password: str) -> tuple[Partner | None, str]:
        partner = self.get_by_email(email)
        if not partner:
            return None, "Parceiro não encontrado com este email"
        if not partner.access_enabled or partner.status == PartnerStatus.INACTIVE.value:
            return None, "Acesso não autorizado. Entre em contato com o administrador."
        if not partner.password_hash or not verify_password(password, partner.password_hash):
            return None, "Senha incorreta"
        partner.last_activity = utcnow()
        self.session.add(partner)
        self.activities.record(
            "partner_login",
            f"Parceiro {sanitize_for_log(partner.name)} fez login no sistema",
            related_id=partner.id,
            commit=False,
        )
        self.session.commit()
        self.session.refresh(partner)
        return partner, "Login autorizado"

    def open_dashboard(self, token: str, links: LinkIssuer | None = None) -> PartnerDashboard:
        issuer = links or LinkIssuer(self.session)
        partner = issuer.resolve_partner(token)
        if not partner.access_enabled:
            raise AccessDeniedError("Partner dashboard access is disabled")
        self.register_access(partner)
        contracts = list(
            self.session.exec(
                select(Contract).where(Contract.partner_id == partner.id).order_by(Contract.created_at.desc())
            ).all()
        )
        customers = list(
            self.session.exec(
                select(Customer).where(Customer.partner_id == partner.id).order_by(Customer.created_at.desc())
            ).all()
        )
        stats = ReportingService(self.session).partner_summary(partner)
        return PartnerDashboard(partner=partner, contracts=contracts, customers=customers, stats=stats)

    def register_access(self, partner: Partner) -> None:
        now = utcnow()
        log = list(partner.access_log or [])
        log.append(now.isoformat())
        partner.access_log = log[-ACCESS_LOG_LIMIT:]
        partner.access_count = (partner.access_count or 0) + 1
        partner.last_access = now
        self.session.add(partner)
        self.session.commit()
        self.session.refresh(partner)

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("Partner conflicts with an existing record") from exc
