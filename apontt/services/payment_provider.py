from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Protocol

from apontt.core.config import settings


@dataclass
class ChargeRequest:
    billing_type: str
    value: Decimal
    due_date: date
    customer_name: str
    customer_document: str
    description: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    external_reference: str | None = None
    provider_customer_id: str | None = None


@dataclass
class ChargeResult:
    external_id: str
    status: str
    invoice_url: str | None = None
    bank_slip_url: str | None = None
    pix_code: str | None = None
    provider_customer_id: str | None = None
    is_simulation: bool = False


class BillingProvider(Protocol):
    name: str
    is_simulation: bool

    def create_charge(self, request: ChargeRequest) -> ChargeResult:
        ...

    def get_charge(self, external_id: str) -> ChargeResult:
        ...

    def get_account(self) -> dict[str, Any]:
        ...


class SimulationProvider:
    """Usado quando ASAAS_API_KEY não está configurada: não faz nenhuma chamada de rede."""

    name = "simulation"
    is_simulation = True

    def __init__(self, public_base_url: str | None = None) -> None:
        self.public_base_url = (public_base_url or settings.resolved_public_app_url()).rstrip("/")

    def create_charge(self, request: ChargeRequest) -> ChargeResult:
        external_id = f"sim_{uuid.uuid4().hex[:16]}"
        invoice_url = f"{self.public_base_url}/payment/simulated/{external_id}"
        pix_code = None
        bank_slip_url = None
        if request.billing_type == "PIX":
            pix_code = f"00020126SIMULADO{external_id}5204000053039865802BR"
        elif request.billing_type == "BOLETO":
            bank_slip_url = f"{invoice_url}/boleto"
        return ChargeResult(
            external_id=external_id,
            status="PENDING",
            invoice_url=invoice_url,
            bank_slip_url=bank_slip_url,
            pix_code=pix_code,
            provider_customer_id=f"sim_cus_{uuid.uuid4().hex[:12]}",
            is_simulation=True,
        )

    def get_charge(self, external_id: str) -> ChargeResult:
        return ChargeResult(
            external_id=external_id,
            status="PENDING",
            invoice_url=f"{self.public_base_url}/payment/simulated/{external_id}",
            is_simulation=True,
        )

    def get_account(self) -> dict[str, Any]:
        return {"name": "Modo simulação", "simulation": True}
