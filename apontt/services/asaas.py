from __future__ import annotations

import re
from typing import Any

import httpx

from apontt.core.config import settings
from apontt.core.exceptions import PaymentProviderError
from apontt.core.logging_setup import logger
from apontt.services.payment_provider import ChargeRequest, ChargeResult
from apontt.utils.documents import only_digits

SANDBOX_URL = "https://sandbox.asaas.com/api/v3"
PRODUCTION_URL = "https://www.asaas.com/api/v3"

_UUID_KEY = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)


def is_sandbox_key(api_key: str) -> bool:
    key = (api_key or "").strip()
    return key.startswith("$aact_hmlg") or bool(_UUID_KEY.match(key))


def resolve_base_url(api_key: str, override: str | None = None) -> str:
    if override:
        return override.rstrip("/")
    return SANDBOX_URL if is_sandbox_key(api_key) else PRODUCTION_URL


def _error_message(payload: dict[str, Any], status_code: int) -> str:
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        description = errors[0].get("description") if isinstance(errors[0], dict) else None
        if description:
            return str(description)
    if status_code == 401:
        return "Chave da API Asaas inválida ou sem permissão"
    return str(payload.get("message") or payload.get("error") or f"Asaas respondeu com status {status_code}")


def _require_id(payload: Any) -> str:
    if not isinstance(payload, dict) or not payload.get("id"):
        raise PaymentProviderError("Resposta inválida do Asaas", details={"body": payload})
    return str(payload["id"])


class AsaasProvider:
    """Cliente HTTP da API v3 do Asaas. Uma única tentativa por chamada, sem retry."""

    name = "asaas"
    is_simulation = False

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise PaymentProviderError("Chave da API Asaas não configurada")
        self.base_url = resolve_base_url(api_key, base_url)
        self.environment = "sandbox" if self.base_url == SANDBOX_URL else "production"
        self._timeout = timeout_seconds or settings.asaas_timeout_seconds or 20.0
        self._headers = {
            "access_token": api_key,
            "Content-Type": "application/json",
            "User-Agent": "apontt-crm",
        }
        self._transport = transport

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            with httpx.Client(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as exc:
            raise PaymentProviderError(f"Asaas não respondeu em {self._timeout:g}s") from exc
        except httpx.RequestError as exc:
            raise PaymentProviderError(f"Falha ao conectar com o Asaas: {exc}") from exc

        if response.status_code >= 400:
            try:
                payload = response.json()
            except ValueError:
                payload = {"error": response.text}
            if not isinstance(payload, dict):
                payload = {"error": str(payload)}
            raise PaymentProviderError(
                _error_message(payload, response.status_code),
                provider_status=response.status_code,
                details=payload,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise PaymentProviderError("Resposta inválida do Asaas") from exc
        if not isinstance(payload, dict):
            raise PaymentProviderError("Resposta inválida do Asaas", details={"body": payload})
        return payload

    def find_or_create_customer(self, request: ChargeRequest) -> str:
        document = only_digits(request.customer_document)
        found = self._request("GET", "/customers", params={"cpfCnpj": document})
        existing = found.get("data") or []
        if existing:
            return _require_id(existing[0])

        body: dict[str, Any] = {"name": request.customer_name, "cpfCnpj": document}
        if request.customer_email:
            body["email"] = request.customer_email
        if request.customer_phone:
            body["mobilePhone"] = only_digits(request.customer_phone)
        created = self._request("POST", "/customers", json=body)
        return _require_id(created)

    def create_charge(self, request: ChargeRequest) -> ChargeResult:
        customer_id = request.provider_customer_id or self.find_or_create_customer(request)
        body: dict[str, Any] = {
            "customer": customer_id,
            "billingType": request.billing_type,
            "value": float(request.value),
            "dueDate": request.due_date.isoformat(),
            "description": request.description or "",
        }
        if request.external_reference:
            body["externalReference"] = request.external_reference
        data = self._request("POST", "/payments", json=body)
        payment_id = _require_id(data)

        pix_code: str | None = None
        if request.billing_type == "PIX":
            try:
                qr = self._request("GET", f"/payments/{payment_id}/pixQrCode")
                pix_code = qr.get("payload")
            except PaymentProviderError as exc:
                logger.warning("QR Code PIX indisponível para a cobrança %s: %s", payment_id, exc)

        return ChargeResult(
            external_id=payment_id,
            status=str(data.get("status") or "PENDING"),
            invoice_url=data.get("invoiceUrl"),
            bank_slip_url=data.get("bankSlipUrl"),
            pix_code=pix_code,
            provider_customer_id=customer_id,
            is_simulation=False,
        )

    def get_charge(self, external_id: str) -> ChargeResult:
        data = self._request("GET", f"/payments/{external_id}")
        return ChargeResult(
            external_id=str(data.get("id") or external_id),
            status=str(data.get("status") or "PENDING"),
            invoice_url=data.get("invoiceUrl"),
            bank_slip_url=data.get("bankSlipUrl"),
            provider_customer_id=data.get("customer"),
            is_simulation=False,
        )

    def get_account(self) -> dict[str, Any]:
        return self._request("GET", "/myAccount")
