from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from apontt.core.config import settings
from apontt.core.exceptions import ConflictError, NotFoundError, PaymentProviderError, ValidationError
from apontt.core.logging_setup import logger
from apontt.models.contract import Contract, ContractStatus
from apontt.models.customer import Customer
from apontt.models.payment import BillingType, Payment
from apontt.services.activity import ActivityService
from apontt.services.asaas import AsaasProvider
from apontt.services.payment_provider import BillingProvider, ChargeRequest, ChargeResult, SimulationProvider
from apontt.utils.documents import format_brl, is_valid_tax_id, only_digits


def provider_from_settings() -> BillingProvider:
    if settings.asaas_api_key:
        return AsaasProvider(
            settings.asaas_api_key,
            base_url=settings.asaas_base_url,
            timeout_seconds=settings.asaas_timeout_seconds,
        )
    return SimulationProvider()


class PaymentService:
    def __init__(self, session: Session, provider: BillingProvider | None = None) -> None:
        self.session = session
        self.provider = provider or provider_from_settings()
        self.activities = ActivityService(session)

    # Consultas -----------------------------------------------------------------
    def list_payments(self, status: str | None = None, customer_document: str | None = None) -> list[Payment]:
        statement = select(Payment)
        if status:
            statement = statement.where(Payment.status == status)
        if customer_document:
            statement = statement.where(Payment.customer_document == only_digits(customer_document))
        return list(self.session.exec(statement.order_by(Payment.created_at.desc())).all())

    def get_payment(self, payment_id: str | UUID) -> Payment:
        payment = self.session.get(Payment, UUID(str(payment_id)))
        if not payment:
            raise NotFoundError("Payment not found")
        return payment

    # Cobranças ----------------------------------------------------------------
    def validate_request(self, request: ChargeRequest, *, today: date | None = None) -> None:
        today = today or date.today()
        fields: list[dict[str, str]] = []
        if request.value is None or request.value <= 0:
            fields.append({"field": "value", "message": "Valor deve ser maior que zero"})
        if request.due_date is None or request.due_date < today:
            fields.append({"field": "due_date", "message": "Data de vencimento não pode estar no passado"})
        if not (request.customer_name or "").strip():
            fields.append({"field": "customer_name", "message": "Nome do cliente é obrigatório"})
        if not is_valid_tax_id(request.customer_document):
            fields.append({"field": "customer_document", "message": "CPF/CNPJ inválido"})
        if request.billing_type not in {item.value for item in BillingType}:
            fields.append({"field": "billing_type", "message": "Forma de pagamento inválida"})
        if fields:
            raise ValidationError("Dados da cobrança inválidos", fields=fields)

    def create_charge(self, request: ChargeRequest, *, contract_id: UUID | None = None) -> Payment:
        """Valida, chama o provedor e só então grava o pagamento."""
        self.validate_request(request)
        if contract_id:
            self._signed_contract(contract_id)
        document = only_digits(request.customer_document)
        customer = self.session.exec(select(Customer).where(Customer.cpf == document)).first()
        if customer and customer.asaas_customer_id and not self.provider.is_simulation:
            request.provider_customer_id = customer.asaas_customer_id
        if contract_id and not request.external_reference:
            request.external_reference = str(contract_id)

        try:
            result = self.provider.create_charge(request)
        except PaymentProviderError as exc:
            logger.warning("Falha ao criar cobrança no provedor %s: %s", self.provider.name, exc.message)
            raise

        payment = self._build_payment(request, result, document, contract_id)
        self.session.add(payment)
        if customer and result.provider_customer_id and not result.is_simulation:
            customer.asaas_customer_id = result.provider_customer_id
            self.session.add(customer)
        self.activities.record(
            "payment_created",
            f"Cobrança {request.billing_type} de {format_brl(payment.value)} para {payment.customer_name}",
            value=payment.value,
            related_id=contract_id or payment.id,
            commit=False,
        )
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("Payment already registered for this provider id") from exc
        self.session.refresh(payment)
        logger.info(
            "Cobrança %s criada (simulação=%s, valor=%s)",
            payment.external_id,
            payment.is_simulation,
            payment.value,
        )
        return payment

    def create_contract_charge(self, contract_id: str | UUID, billing_type: str = BillingType.PIX.value) -> Payment:
        contract = self._signed_contract(contract_id)
        request = ChargeRequest(
            billing_type=billing_type,
            value=contract.value,
            due_date=date.today() + timedelta(days=settings.contract_payment_due_days),
            description=contract.description or f"Contrato {contract.type} - {contract.client_name}",
            customer_name=contract.client_name,
            customer_document=contract.client_document,
            customer_email=contract.client_email,
            customer_phone=contract.client_phone,
            external_reference=str(contract.id),
        )
        return self.create_charge(request, contract_id=contract.id)

    def _signed_contract(self, contract_id: str | UUID) -> Contract:
        contract = self.session.get(Contract, UUID(str(contract_id)))
        if not contract:
            raise NotFoundError("Contract not found")
        if contract.status != ContractStatus.SIGNED.value:
            raise ConflictError("Only signed contracts can be charged")
        return contract

    def refresh_status(self, payment_id: str | UUID) -> Payment:
        payment = self.get_payment(payment_id)
        if payment.is_simulation:
            return payment
        result = self.provider.get_charge(payment.external_id)
        if result.status != payment.status or (result.invoice_url and result.invoice_url != payment.invoice_url):
            payment.status = result.status
            payment.invoice_url = result.invoice_url or payment.invoice_url
            payment.bank_slip_url = result.bank_slip_url or payment.bank_slip_url
            payment.touch()
            self.session.add(payment)
            self.session.commit()
            self.session.refresh(payment)
        return payment

    def delete_payment(self, payment_id: str | UUID) -> None:
        payment = self.get_payment(payment_id)
        description = f"Cobrança {payment.external_id} removida da carteira"
        payment_ref = payment.id
        self.session.delete(payment)
        self.activities.record("payment_deleted", description, related_id=payment_ref, commit=False)
        self.session.commit()

    def provider_status(self) -> dict[str, object]:
        status: dict[str, object] = {
            "provider": self.provider.name,
            "simulation": self.provider.is_simulation,
            "environment": getattr(self.provider, "environment", None),
        }
        try:
            account = self.provider.get_account()
        except PaymentProviderError as exc:
            return {**status, "connected": False, "message": exc.message}
        return {
            **status,
            "connected": True,
            "account_name": account.get("name") or account.get("companyName"),
            "message": "Modo simulação ativo" if self.provider.is_simulation else "Conexão com Asaas ativa",
        }

    @staticmethod
    def _build_payment(
        request: ChargeRequest,
        result: ChargeResult,
        document: str,
        contract_id: UUID | None,
    ) -> Payment:
        return Payment(
            external_id=result.external_id,
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            customer_phone=request.customer_phone,
            customer_document=document,
            value=Decimal(request.value),
            due_date=request.due_date,
            description=request.description,
            billing_type=request.billing_type,
            status=result.status,
            invoice_url=result.invoice_url,
            bank_slip_url=result.bank_slip_url,
            pix_code=result.pix_code,
            is_simulation=result.is_simulation,
            contract_id=contract_id,
        )
