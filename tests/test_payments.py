from datetime import date, timedelta
from decimal import Decimal
from uuid import uuid4

import httpx
import pytest
from fastapi import status
from sqlmodel import select

from apontt.core.config import settings
from apontt.core.exceptions import ConflictError, NotFoundError, PaymentProviderError, ValidationError
from apontt.models.customer import Customer
from apontt.models.payment import Payment
from apontt.services.payment_provider import ChargeRequest, ChargeResult, SimulationProvider
from apontt.services.contracts import ContractService
from apontt.services.payments import PaymentService, provider_from_settings
from tests.conftest import make_contract_create

API = settings.api_prefix


class RecordingProvider:
    name = "recording"
    is_simulation = False

    def __init__(self, error: PaymentProviderError | None = None) -> None:
        self.error = error
        self.requests: list[ChargeRequest] = []

    def create_charge(self, request: ChargeRequest) -> ChargeResult:
        self.requests.append(request)
        if self.error:
            raise self.error
        external_id = f"pay_{len(self.requests)}"
        return ChargeResult(
            external_id=external_id,
            status="PENDING",
            invoice_url=f"https://pay.example.com/i/{external_id}",
            provider_customer_id="cus_999",
        )

    def get_charge(self, external_id: str) -> ChargeResult:
        return ChargeResult(external_id=external_id, status="RECEIVED")

    def get_account(self) -> dict:
        return {"name": "Conta Teste"}


def _request(**overrides) -> ChargeRequest:
    data = {
        "billing_type": "PIX",
        "value": Decimal("500.00"),
        "due_date": date.today() + timedelta(days=3),
        "customer_name": "Maria Silva",
        "customer_document": "123.456.789-00",
        "customer_phone": "11987654321",
        "description": "Consultoria",
    }
    data.update(overrides)
    return ChargeRequest(**data)


def test_charge_is_persisted_after_provider_success(db_session):
    provider = RecordingProvider()
    payment = PaymentService(db_session, provider=provider).create_charge(_request())

    assert len(provider.requests) == 1
    assert payment.external_id == "pay_1"
    assert payment.customer_document == "12345678900"
    assert payment.value == Decimal("500.00")
    assert payment.is_simulation is False
    assert payment.invoice_url == "https://pay.example.com/i/pay_1"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"value": Decimal("0")}, "value"),
        ({"value": Decimal("-10")}, "value"),
        ({"due_date": date.today() - timedelta(days=1)}, "due_date"),
        ({"customer_document": "123"}, "customer_document"),
        ({"customer_name": "  "}, "customer_name"),
        ({"billing_type": "CHEQUE"}, "billing_type"),
    ],
)
def test_invalid_requests_never_reach_the_provider(db_session, overrides, field):
    provider = RecordingProvider()

    with pytest.raises(ValidationError) as exc_info:
        PaymentService(db_session, provider=provider).create_charge(_request(**overrides))

    assert field in {item["field"] for item in exc_info.value.fields}
    assert provider.requests == []
    assert db_session.exec(select(Payment)).all() == []


def test_provider_failure_persists_nothing(db_session):
    provider = RecordingProvider(error=PaymentProviderError("Cliente inválido", provider_status=400))

    with pytest.raises(PaymentProviderError):
        PaymentService(db_session, provider=provider).create_charge(_request())

    assert db_session.exec(select(Payment)).all() == []


def test_provider_customer_id_is_stored_on_matching_customer(db_session):
    customer = Customer(name="Maria Silva", cpf="12345678900")
    db_session.add(customer)
    db_session.commit()

    provider = RecordingProvider()
    service = PaymentService(db_session, provider=provider)
    service.create_charge(_request())

    db_session.refresh(customer)
    assert customer.asaas_customer_id == "cus_999"

    service.create_charge(_request())
    assert provider.requests[0].provider_customer_id is None
    assert provider.requests[1].provider_customer_id == "cus_999"


def test_simulation_mode_makes_no_network_calls(db_session, monkeypatch):
    def forbidden(*args, **kwargs):
        raise AssertionError("network call in simulation mode")

    monkeypatch.setattr(httpx.Client, "send", forbidden)

    provider = provider_from_settings()
    assert isinstance(provider, SimulationProvider)

    payment = PaymentService(db_session).create_charge(_request(billing_type="BOLETO"))
    assert payment.is_simulation is True
    assert payment.external_id.startswith("sim_")
    assert payment.invoice_url.startswith("https://crm.example.com/")
    assert payment.bank_slip_url


def test_refresh_updates_status_from_provider(db_session):
    service = PaymentService(db_session, provider=RecordingProvider())
    payment = service.create_charge(_request())

    refreshed = service.refresh_status(payment.id)

    assert refreshed.status == "RECEIVED"


def test_charge_endpoint_validation(client, admin_headers):
    response = client.post(
        f"{API}/payments/asaas",
        json={
            "billingType": "PIX",
            "value": "0",
            "dueDate": (date.today() + timedelta(days=2)).isoformat(),
            "customerName": "Maria Silva",
            "cpfCnpj": "12345678900",
        },
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["error"] == "validation_error"


def test_charge_endpoint_in_simulation_mode(client, admin_headers):
    response = client.post(
        f"{API}/payments/asaas",
        json={
            "billingType": "PIX",
            "value": "250,50",
            "dueDate": (date.today() + timedelta(days=2)).isoformat(),
            "customerName": "Maria Silva",
            "cpfCnpj": "123.456.789-00",
            "customerPhone": "(11) 98765-4321",
        },
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED, response.json()
    payment = response.json()
    assert Decimal(payment["value"]) == Decimal("250.50")
    assert payment["is_simulation"] is True
    assert payment["pix_code"]

    listing = client.get(f"{API}/wallet/payments", headers=admin_headers)
    assert [item["id"] for item in listing.json()] == [payment["id"]]

    status_response = client.get(f"{API}/payments/provider-status", headers=admin_headers)
    assert status_response.json()["simulation"] is True
    assert status_response.json()["connected"] is True

    deleted = client.delete(f"{API}/wallet/payments/{payment['id']}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"{API}/wallet/payments", headers=admin_headers).json() == []


def test_whatsapp_send_builds_link(client, admin_headers):
    response = client.post(
        f"{API}/whatsapp/send",
        json={"phone": "+55 (11) 98765-4321", "message": "Olá Maria"},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["url"] == "https://wa.me/5511987654321?text=Ol%C3%A1%20Maria"

    invalid = client.post(
        f"{API}/whatsapp/send",
        json={"phone": "1234", "message": "Olá"},
        headers=admin_headers,
    )
    assert invalid.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_charge_linked_to_unsigned_contract_is_refused(db_session):
    contract = ContractService(db_session).create_contract(make_contract_create())
    provider = RecordingProvider()

    with pytest.raises(ConflictError):
        PaymentService(db_session, provider=provider).create_charge(_request(), contract_id=contract.id)

    assert provider.requests == []
    assert db_session.exec(select(Payment)).all() == []


def test_charge_linked_to_unknown_contract_is_not_found(db_session):
    provider = RecordingProvider()

    with pytest.raises(NotFoundError):
        PaymentService(db_session, provider=provider).create_charge(_request(), contract_id=uuid4())

    assert provider.requests == []


def test_charge_endpoint_checks_the_linked_contract(client, admin_headers, db_session):
    contract = ContractService(db_session).create_contract(make_contract_create())
    body = {
        "billingType": "PIX",
        "value": "500,00",
        "dueDate": (date.today() + timedelta(days=2)).isoformat(),
        "customerName": "Maria Silva",
        "cpfCnpj": "123.456.789-00",
    }

    unsigned = client.post(
        f"{API}/payments/asaas", json={**body, "contractId": str(contract.id)}, headers=admin_headers
    )
    assert unsigned.status_code == status.HTTP_409_CONFLICT

    unknown = client.post(f"{API}/payments/asaas", json={**body, "contractId": str(uuid4())}, headers=admin_headers)
    assert unknown.status_code == status.HTTP_404_NOT_FOUND

    assert client.get(f"{API}/wallet/payments", headers=admin_headers).json() == []
