from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sqlmodel import Session, func, select

from apontt.models.base import as_utc, utcnow
from apontt.models.contract import Contract, ContractStatus
from apontt.models.customer import Customer, CustomerStatus
from apontt.models.partner import Partner, PartnerStatus
from apontt.models.payment import PAID_PAYMENT_STATUSES, Payment, PaymentStatus
from apontt.utils.documents import CENTS

WINDOW_DAYS = 30


def growth(current: float | Decimal, previous: float | Decimal) -> float:
    """Variação percentual; 100 quando o período anterior era zero e o atual não."""
    current, previous = float(current), float(previous)
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 2)


def _money(value: object) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTS)


@dataclass
class Window:
    start: datetime
    end: datetime


class ReportingService:
    """Indicadores do painel, recalculados a cada requisição."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def metrics(self, now: datetime | None = None) -> dict[str, object]:
        now = as_utc(now) if now else utcnow()
        current = Window(start=now - timedelta(days=WINDOW_DAYS), end=now)
        previous = Window(start=current.start - timedelta(days=WINDOW_DAYS), end=current.start)

        month_sales = self._sales(current)
        previous_sales = self._sales(previous)
        new_leads = self._new_leads(current)
        previous_leads = self._new_leads(previous)
        conversion_rate = self._conversion_rate(until=now)
        previous_conversion = self._conversion_rate(until=current.start)
        active_partners = self._active_partners(until=now)
        previous_partners = self._active_partners(until=current.start)

        return {
            "month_sales": month_sales,
            "new_leads": new_leads,
            "conversion_rate": conversion_rate,
            "active_partners": active_partners,
            "sales_growth": growth(month_sales, previous_sales),
            "leads_growth": growth(new_leads, previous_leads),
            "conversion_growth": growth(conversion_rate, previous_conversion),
            "partners_growth": growth(active_partners, previous_partners),
            "contracts_by_status": self._count_by(Contract, Contract.status, [s.value for s in ContractStatus]),
            "payments_by_status": self._count_by(Payment, Payment.status, [s.value for s in PaymentStatus]),
            "signed_contracts_value": _money(
                self.session.exec(
                    select(func.sum(Contract.value)).where(Contract.status == ContractStatus.SIGNED.value)
                ).one()
            ),
            "pending_payments_value": _money(
                self.session.exec(
                    select(func.sum(Payment.value)).where(Payment.status == PaymentStatus.PENDING.value)
                ).one()
            ),
        }

    def partner_summary(self, partner: Partner) -> dict[str, object]:
        """Resumo exibido no painel público do parceiro."""
        contracts = self.session.exec(
            select(Contract.status, func.count()).where(Contract.partner_id == partner.id).group_by(Contract.status)
        ).all()
        total_customers = self.session.exec(
            select(func.count()).select_from(Customer).where(Customer.partner_id == partner.id)
        ).one()
        counts = dict(contracts)
        return {
            "total_contracts": sum(counts.values()),
            "signed_contracts": counts.get(ContractStatus.SIGNED.value, 0),
            "total_customers": total_customers,
            "total_sales": _money(partner.total_sales),
            "total_commissions": _money(partner.total_commissions),
        }

    def _sales(self, window: Window) -> Decimal:
        total = self.session.exec(
            select(func.sum(Payment.value))
            .where(Payment.status.in_(PAID_PAYMENT_STATUSES))
            .where(Payment.created_at >= window.start)
            .where(Payment.created_at < window.end)
        ).one()
        return _money(total)

    def _new_leads(self, window: Window) -> int:
        return self.session.exec(
            select(func.count())
            .select_from(Customer)
            .where(Customer.status == CustomerStatus.LEAD.value)
            .where(Customer.created_at >= window.start)
            .where(Customer.created_at < window.end)
        ).one()

    def _conversion_rate(self, until: datetime) -> float:
        total = self.session.exec(
            select(func.count()).select_from(Customer).where(Customer.created_at <= until)
        ).one()
        if not total:
            return 0.0
        converted = self.session.exec(
            select(func.count())
            .select_from(Customer)
            .where(Customer.created_at <= until)
            .where(Customer.status.in_((CustomerStatus.QUALIFIED.value, CustomerStatus.CUSTOMER.value)))
        ).one()
        return round(converted / total * 100, 2)

    def _active_partners(self, until: datetime) -> int:
        return self.session.exec(
            select(func.count())
            .select_from(Partner)
            .where(Partner.status == PartnerStatus.ACTIVE.value)
            .where(Partner.created_at <= until)
        ).one()

    def _count_by(self, model, column, known: list[str]) -> dict[str, int]:
        counts = {value: 0 for value in known}
        rows = self.session.exec(select(column, func.count()).select_from(model).group_by(column)).all()
        for value, count in rows:
            counts[value] = count
        return counts
