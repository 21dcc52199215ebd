import json
from datetime import date
from decimal import Decimal

import httpx
import pytest

from apontt.core.exceptions import PaymentProviderError
from apontt.services.asaas import PRODUCTION_URL, SANDBOX_URL, AsaasProvider, is_sandbox_key
from apontt.services.payment_provider import ChargeRequest

SANDBOX_KEY = "$aact_hmlg_000MzkwODA2MWY2OGM3MWRlMDU2NWM3MzJlNzZmNGZhZGY6OmY"


def _request(**overrides) -> ChargeRequest:
    data = {
        "billing_type": "PIX",
        "value": Decimal("500.00"),
        "due_date": date(2030, 1, 15),
        "customer_name": "Maria Silva",
        "customer_document": "12345678900",
        "customer_email": "maria@example.com",
        "description": "Consultoria",
    }
    data.update(overrides)
    return ChargeRequest(**data)


def _provider(handler) -> AsaasProvider:
    return AsaasProvider(SANDBOX_KEY, transport=httpx.MockTransport(handler))


def test_sandbox_key_selects_sandbox_url():
    assert is_sandbox_key(SANDBOX_KEY)
    assert is_sandbox_key("123e4567-e89b-12d3-a456-426614174000")
    assert not is_sandbox_key("$aact_prod_abc")

    assert AsaasProvider(SANDBOX_KEY).base_url == SANDBOX_URL
    assert AsaasProvider("$aact_prod_abc").environment == "production"
    assert AsaasProvider("$aact_prod_abc").base_url == PRODUCTION_URL


def test_missing_key_is_rejected():
    with pytest.raises(PaymentProviderError):
        AsaasProvider("")


def test_create_pix_charge_creates_customer_and_fetches_qr_code():
    calls: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        assert request.headers["access_token"] == SANDBOX_KEY
        if request.method == "GET" and request.url.path.endswith("/customers"):
            assert request.url.params["cpfCnpj"] == "12345678900"
            return httpx.Response(200, json={"data": []})
        if request.method == "POST" and request.url.path.endswith("/customers"):
            body = json.loads(request.content)
            assert body["name"] == "Maria Silva"
            return httpx.Response(200, json={"id": "cus_000005"})
        if request.method == "POST" and request.url.path.endswith("/payments"):
            body = json.loads(request.content)
            assert body["customer"] == "cus_000005"
            assert body["billingType"] == "PIX"
            assert body["value"] == 500.0
            assert body["dueDate"] == "2030-01-15"
            return httpx.Response(
                200,
                json={"id": "pay_080225913252", "status": "PENDING", "invoiceUrl": "https://sandbox.asaas.com/i/080225913252"},
            )
        if request.url.path.endswith("/pixQrCode"):
            return httpx.Response(200, json={"payload": "00020101021226830014br.gov.bcb.pix"})
        return httpx.Response(404, json={})

    result = _provider(handler).create_charge(_request())

    assert result.external_id == "pay_080225913252"
    assert result.status == "PENDING"
    assert result.invoice_url == "https://sandbox.asaas.com/i/080225913252"
    assert result.pix_code.startswith("000201")
    assert result.provider_customer_id == "cus_000005"
    assert result.is_simulation is False
    assert [method for method, _ in calls] == ["GET", "POST", "POST", "GET"]


def test_known_customer_skips_lookup():
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(200, json={"id": "pay_1", "status": "PENDING", "bankSlipUrl": "https://x/boleto"})

    result = _provider(handler).create_charge(_request(billing_type="BOLETO", provider_customer_id="cus_1"))

    assert paths == ["/api/v3/payments"]
    assert result.bank_slip_url == "https://x/boleto"
    assert result.pix_code is None


def test_missing_pix_qr_code_does_not_fail_the_charge():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/pixQrCode"):
            return httpx.Response(500, json={"errors": [{"description": "indisponível"}]})
        return httpx.Response(200, json={"id": "pay_2", "status": "PENDING"})

    result = _provider(handler).create_charge(_request(provider_customer_id="cus_1"))

    assert result.external_id == "pay_2"
    assert result.pix_code is None


def test_provider_error_description_is_surfaced():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"errors": [{"code": "invalid_cpfCnpj", "description": "O CPF/CNPJ informado é inválido."}]},
        )

    with pytest.raises(PaymentProviderError) as exc_info:
        _provider(handler).create_charge(_request(provider_customer_id="cus_1"))

    assert exc_info.value.message == "O CPF/CNPJ informado é inválido."
    assert exc_info.value.provider_status == 400
    assert exc_info.value.status_code == 502


def test_invalid_key_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="")

    with pytest.raises(PaymentProviderError) as exc_info:
        _provider(handler).get_account()

    assert exc_info.value.provider_status == 401
    assert "inválida" in exc_info.value.message


def test_timeout_is_reported():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(PaymentProviderError) as exc_info:
        _provider(handler).get_charge("pay_1")

    assert "não respondeu" in exc_info.value.message


def test_get_charge_maps_status():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v3/payments/pay_9"
        return httpx.Response(200, json={"id": "pay_9", "status": "RECEIVED", "customer": "cus_1"})

    result = _provider(handler).get_charge("pay_9")

    assert result.status == "RECEIVED"
    assert result.provider_customer_id == "cus_1"


@pytest.mark.parametrize(
    "path, body",
    [
        ("/customers", {"data": [{"name": "Maria Silva"}]}),
        ("/payments", {"status": "PENDING"}),
    ],
)
def test_response_without_id_is_a_provider_error(path, body):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith(path):
            return httpx.Response(200, json=body)
        if request.url.path.endswith("/customers") and request.method == "GET":
            return httpx.Response(200, json={"data": [{"id": "cus_000005"}]})
        raise AssertionError(f"unexpected call {request.method} {request.url.path}")

    with pytest.raises(PaymentProviderError) as exc_info:
        _provider(handler).create_charge(_request())

    assert exc_info.value.message == "Resposta inválida do Asaas"


def test_non_object_response_is_a_provider_error():
    provider = _provider(lambda request: httpx.Response(200, json=["unexpected"]))

    with pytest.raises(PaymentProviderError):
        provider.get_account()


def test_each_call_uses_a_short_lived_client(monkeypatch):
    opened: list[httpx.Client] = []
    original_enter = httpx.Client.__enter__

    def tracking_enter(self):
        opened.append(self)
        return original_enter(self)

    monkeypatch.setattr(httpx.Client, "__enter__", tracking_enter)
    provider = _provider(lambda request: httpx.Response(200, json={"name": "Conta Teste"}))

    assert provider.get_account() == {"name": "Conta Teste"}
    assert provider.get_account() == {"name": "Conta Teste"}

    assert len(opened) == 2
    assert all(client.is_closed for client in opened)
