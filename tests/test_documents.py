from datetime import date
from decimal import Decimal

import pytest

from apontt.core.exceptions import ValidationError
from apontt.services.documents import DocumentRenderer
from apontt.services.notifications import build_whatsapp_link, payment_message
from apontt.utils.documents import format_brl, format_tax_id, is_valid_tax_id, normalize_phone, parse_money


@pytest.mark.parametrize(
    "value, expected",
    [
        ("123.456.789-00", True),
        ("12345678900", True),
        ("12.345.678/0001-90", True),
        ("111.111.111-11", False),
        ("1234567890", False),
        ("abc.def.ghi-jk", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_tax_id(value, expected):
    assert is_valid_tax_id(value) is expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("500,00", Decimal("500.00")),
        ("1.500,75", Decimal("1500.75")),
        ("R$ 99,9", Decimal("99.90")),
        ("500.005", Decimal("500.01")),
        (500, Decimal("500.00")),
        (Decimal("12.345"), Decimal("12.35")),
    ],
)
def test_parse_money(raw, expected):
    assert parse_money(raw) == expected


def test_parse_money_rejects_garbage():
    with pytest.raises(ValueError):
        parse_money("quinhentos")


@pytest.mark.parametrize("raw", ["1e30", "10000000000", Decimal("-1E+40"), "NaN", "Infinity"])
def test_parse_money_rejects_out_of_range(raw):
    with pytest.raises(ValueError):
        parse_money(raw)


def test_parse_money_accepts_the_largest_amount():
    assert parse_money("9.999.999.999,99") == Decimal("9999999999.99")


def test_formatting_helpers():
    assert format_brl(Decimal("1500.5")) == "R$ 1.500,50"
    assert format_tax_id("12345678900") == "123.456.789-00"
    assert format_tax_id("12345678000190") == "12.345.678/0001-90"
    assert normalize_phone("+55 (11) 98765-4321") == "11987654321"


def test_whatsapp_link_requires_area_code():
    assert build_whatsapp_link("(11) 3456-7890", "Oi").startswith("https://wa.me/551134567890?text=Oi")
    with pytest.raises(ValidationError):
        build_whatsapp_link("98765-4321", "Oi")


def test_payment_message_mentions_amount_and_link():
    message = payment_message("Maria", Decimal("500"), "https://pay.example.com/i/1")
    assert "R$ 500,00" in message
    assert message.endswith("https://pay.example.com/i/1")


def test_rendered_documents_escape_client_data():
    renderer = DocumentRenderer()

    term = renderer.render_authorization_term(
        client_name="<script>alert(1)</script>",
        client_document="12345678900",
        today=date(2026, 3, 5),
    )
    assert "<script>" not in term
    assert "123.456.789-00" in term
    assert "MARÇO" in term

    contract = renderer.render_contract(
        client_name="Maria Silva",
        client_document="12345678900",
        value=Decimal("500.00"),
        contract_type="consultoria",
        today=date(2026, 3, 5),
    )
    assert "R$ 500,00" in contract
    assert "05 de março de 2026" in contract
