from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from apontt.core.config import settings
from apontt.utils.documents import format_brl, format_tax_id

MONTHS_PT = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


class DocumentRenderer:
    """Gera o HTML do contrato e do termo de autorização a partir dos modelos Jinja2."""

    def __init__(self, template_root: Path | None = None) -> None:
        self.template_root = template_root or Path(__file__).resolve().parent.parent / "templates"
        self.template_env = Environment(
            loader=FileSystemLoader(self.template_root),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def _render_template(self, template_name: str, context: dict) -> str:
        template = self.template_env.get_template(template_name)
        return template.render(**context)

    @staticmethod
    def _date_context(today: date | None) -> dict[str, str]:
        today = today or date.today()
        return {
            "day": f"{today.day:02d}",
            "month": MONTHS_PT[today.month - 1],
            "year": str(today.year),
            "location": settings.document_location,
        }

    def render_authorization_term(
        self,
        *,
        client_name: str,
        client_document: str,
        today: date | None = None,
    ) -> str:
        context = {
            "client_name": client_name,
            "client_document": format_tax_id(client_document),
            **self._date_context(today),
        }
        return self._render_template("authorization_term.html", context)

    def render_contract(
        self,
        *,
        client_name: str,
        client_document: str,
        value: Decimal,
        contract_type: str,
        description: str | None = None,
        terms: str | None = None,
        client_email: str | None = None,
        client_phone: str | None = None,
        today: date | None = None,
    ) -> str:
        context = {
            "client_name": client_name,
            "client_document": format_tax_id(client_document),
            "client_email": client_email,
            "client_phone": client_phone,
            "contract_type": contract_type,
            "description": description,
            "terms": terms,
            "value": format_brl(value),
            "company_name": settings.company_name,
            "company_cnpj": settings.company_cnpj,
            "company_address": settings.company_address,
            "company_email": settings.company_email,
            **self._date_context(today),
        }
        return self._render_template("contract.html", context)
