from __future__ import annotations

from decimal import Decimal
from urllib.parse import quote

from apontt.core.exceptions import ValidationError
from apontt.utils.documents import format_brl, normalize_phone


def build_whatsapp_link(phone: str, message: str) -> str:
    digits = normalize_phone(phone)
    if len(digits) not in (10, 11):
        raise ValidationError.for_field("phone", "Telefone deve ter DDD e 8 ou 9 dígitos")
    return f"https://wa.me/55{digits}?text={quote(message, safe='')}"


def payment_message(customer_name: str, value: Decimal, invoice_url: str | None) -> str:
    lines = [f"Olá {customer_name}!", f"Sua cobrança de {format_brl(value)} está disponível."]
    if invoice_url:
        lines.append(f"Pague pelo link: {invoice_url}")
    return "\n".join(lines)


def signature_message(client_name: str, signature_link: str) -> str:
    return (
        f"Olá {client_name}! Seu contrato está pronto para assinatura. "
        f"Primeiro assine o termo de autorização e depois o contrato: {signature_link}"
    )
