from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi import status

from apontt.core.config import settings
from apontt.models.contract import Contract, ContractStatus
from apontt.models.customer import Customer, CustomerStatus
from apontt.models.partner import Partner, PartnerStatus
from apontt.models.payment import Payment, PaymentStatus
from apontt.schemas.reporting import MetricsRead
from apontt.services.reporting import ReportingService, growth

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "current, previous, expected",
    [
        (150, 100, 50.0),
        (50, 100, -50.0),
        (10, 0, 100.0),
        (0, 0, 0.0),
        (Decimal("1000.00"), Decimal("800.00"), 25.0),
    ],
)
def test_growth(current, previous, expected):
    assert growth(current, previous) == expected


def _payment(value: str, status: str, created_at: datetime, suffix: str) -> Payment:
    return Payment(
        external_id=f"sim_{suffix}",
        customer_name="Maria Silva",
        customer_document="12345678900",
        value=Decimal(value),
        due_date=date(2026, 10, 30),
        billing_type="PIX",
        status=status,
        is_simulation=True,
        created_at=created_at,
    )


def test_metrics_windows(db_session):
    db_session.add_all(
        [
            _payment("1000.00", PaymentStatus.RECEIVED.value, NOW - timedelta(days=2), "a"),
            _payment("200.00", PaymentStatus.CONFIRMED.value, NOW - timedelta(days=10), "b"),
            _payment("300.00", PaymentStatus.PENDING.value, NOW - timedelta(days=1), "c"),
            _payment("1000.00", PaymentStatus.RECEIVED.value, NOW - timedelta(days=40), "d"),
            Customer(name="Lead novo", cpf="12345678900", status=CustomerStatus.LEAD.value, created_at=NOW - timedelta(days=3)),
            Customer(name="Lead antigo", cpf="98765432100", status=CustomerStatus.LEAD.value, created_at=NOW - timedelta(days=45)),
            Customer(name="Cliente", cpf="11122233344", status=CustomerStatus.CUSTOMER.value, created_at=NOW - timedelta(days=5)),
            Partner(name="Ativo", email="ativo@example.com", status=PartnerStatus.ACTIVE.value, created_at=NOW - timedelta(days=90)),
            Partner(name="Inativo", email="inativo@example.com", status=PartnerStatus.INACTIVE.value, created_at=NOW - timedelta(days=90)),
            Contract(
                client_name="Maria Silva",
                client_document="12345678900",
                type="consultoria",
                value=Decimal("500.00"),
                status=ContractStatus.SIGNED.value,
            ),
        ]
    )
    db_session.commit()

    metrics = ReportingService(db_session).metrics(now=NOW)

    assert metrics["month_sales"] == Decimal("1200.00")
    assert metrics["sales_growth"] == 20.0
    assert metrics["new_leads"] == 1
    assert metrics["leads_growth"] == 0.0
    assert metrics["conversion_rate"] == round(1 / 3 * 100, 2)
    assert metrics["active_partners"] == 1
    assert metrics["partners_growth"] == 0.0
    assert metrics["contracts_by_status"][ContractStatus.SIGNED.value] == 1
    assert metrics["contracts_by_status"][ContractStatus.DRAFT.value] == 0
    assert metrics["payments_by_status"][PaymentStatus.PENDING.value] == 1
    assert metrics["signed_contracts_value"] == Decimal("500.00")
    assert metrics["pending_payments_value"] == Decimal("300.00")


def test_metrics_on_empty_database(db_session):
    metrics = ReportingService(db_session).metrics(now=NOW)

    assert metrics["month_sales"] == Decimal("0.00")
    assert metrics["conversion_rate"] == 0.0
    assert metrics["sales_growth"] == 0.0


def test_metrics_endpoint(client, admin_headers):
    response = client.get(f"{settings.api_prefix}/metrics", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    payload = MetricsRead(**response.json())
    assert payload.active_partners == 0
    assert payload.new_leads == 0


def test_metrics_requires_auth(client):
    response = client.get(f"{settings.api_prefix}/metrics")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_partner_summary(db_session):
    partner = Partner(name="Parceiro Sul", email="sul@example.com", total_sales=Decimal("500"))
    db_session.add(partner)
    db_session.commit()
    db_session.add_all(
        [
            Contract(client_name="A", client_document="12345678900", value=Decimal("500"), status="signed", partner_id=partner.id),
            Contract(client_name="B", client_document="12345678900", value=Decimal("300"), status="pending", partner_id=partner.id),
            Contract(client_name="C", client_document="12345678900", value=Decimal("100"), status="signed"),
            Customer(name="Maria", cpf="12345678900", partner_id=partner.id),
        ]
    )
    db_session.commit()

    summary = ReportingService(db_session).partner_summary(partner)

    assert summary == {
        "total_contracts": 2,
        "signed_contracts": 1,
        "total_customers": 1,
        "total_sales": Decimal("500.00"),
        "total_commissions": Decimal("0.00"),
    }
