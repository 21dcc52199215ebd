"""Normalização de documentos brasileiros, telefones e valores monetários."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# Formato aceito (pontuado ou só dígitos); não há verificação de dígito.
_CPF_PATTERN = re.compile(r"^\d{3}\.?\d{3}\.?\d{3}-?\d{2}$")
_CNPJ_PATTERN = re.compile(r"^\d{2}\.?\d{3}\.?\d{3}/?\d{4}-?\d{2}$")

CENTS = Decimal("0.01")
# NUMERIC(12, 2) das colunas de valor
MAX_MONEY = Decimal("9999999999.99")


def only_digits(value: str | None) -> str:
    return "".join(filter(str.isdigit, value or ""))


def is_valid_tax_id(value: str | None) -> bool:
    candidate = (value or "").strip()
    if not (_CPF_PATTERN.match(candidate) or _CNPJ_PATTERN.match(candidate)):
        return False
    digits = only_digits(candidate)
    return len(set(digits)) > 1


def normalize_tax_id(value: str | None) -> str:
    """Valida CPF/CNPJ e devolve a forma só com dígitos."""
    if not is_valid_tax_id(value):
        raise ValueError("CPF/CNPJ inválido")
    return only_digits(value)


def format_tax_id(value: str | None) -> str:
    digits = only_digits(value)
    if len(digits) == 11:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
    if len(digits) == 14:
        return f"{digits[:2]}.{digits[2:5]}.{digits[5:8]}/{digits[8:12]}-{digits[12:]}"
    return value or ""


def parse_money(value: object) -> Decimal:
    """Aceita "500,00", "500.00", 500 ou Decimal e arredonda para centavos."""
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    else:
        raw = str(value or "").strip().replace("R$", "").strip()
        if "," in raw:
            raw = raw.replace(".", "").replace(",", ".")
        try:
            amount = Decimal(raw)
        except InvalidOperation as exc:
            raise ValueError("Valor monetário inválido") from exc
    if not amount.is_finite():
        raise ValueError("Valor monetário inválido")
    if abs(amount) > MAX_MONEY:
        raise ValueError("Valor acima do limite permitido")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError("Valor monetário inválido") from exc


def format_brl(value: Decimal) -> str:
    formatted = f"{value:,.2f}"
    return "R$ " + formatted.replace(",", "X").replace(".", ",").replace("X", ".")


def normalize_phone(value: str | None) -> str:
    """Telefone nacional com DDD; remove o prefixo 55 quando informado."""
    digits = only_digits(value)
    if digits.startswith("55") and len(digits) in (12, 13):
        digits = digits[2:]
    return digits
