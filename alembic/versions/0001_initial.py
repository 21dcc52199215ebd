"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _money(name: str, nullable: bool = True, digits: int = 12) -> sa.Column:
    return sa.Column(name, sa.Numeric(digits, 2), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("username", sa.String(length=64), nullable=False, unique=True),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "partners",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False, unique=True),
        sa.Column("cpf", sa.String(length=14), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("whatsapp", sa.String(length=32), nullable=True),
        sa.Column("company", sa.String(), nullable=True),
        sa.Column("cnpj", sa.String(length=18), nullable=True),
        sa.Column("region", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("observations", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        _money("admin_fee_rate", nullable=False, digits=5),
        _money("total_sales", nullable=False, digits=14),
        _money("total_commissions", nullable=False, digits=14),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column("access_enabled", sa.Boolean(), nullable=False),
        sa.Column("dashboard_token", sa.String(length=96), nullable=True, unique=True),
        sa.Column("last_access", sa.DateTime(timezone=True), nullable=True),
        sa.Column("access_count", sa.Integer(), nullable=False),
        sa.Column("access_log", sa.JSON(), nullable=True),
        sa.Column("last_activity", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_partners_name", "partners", ["name"])
    op.create_index("ix_partners_status", "partners", ["status"])

    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("cpf", sa.String(length=18), nullable=False),
        sa.Column("company", sa.String(), nullable=True),
        sa.Column("document", sa.String(length=18), nullable=True),
        sa.Column("address", sa.String(), nullable=True),
        sa.Column("zip_code", sa.String(length=10), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("asaas_customer_id", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        _money("value"),
        sa.Column("partner_id", sa.Uuid(), sa.ForeignKey("partners.id"), nullable=True),
    )
    op.create_index("ix_customers_cpf", "customers", ["cpf"])
    op.create_index("ix_customers_status", "customers", ["status"])
    op.create_index("ix_customers_partner_id", "customers", ["partner_id"])

    op.create_table(
        "authorization_terms",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("client_name", sa.String(), nullable=False),
        sa.Column("client_document", sa.String(length=18), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("client_signature", sa.String(), nullable=True),
        sa.Column("signer_name", sa.String(), nullable=True),
        sa.Column("client_ip_address", sa.String(length=64), nullable=True),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("link_token", sa.String(length=96), nullable=True, unique=True),
        sa.Column("link_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("signature_link", sa.String(), nullable=True),
        sa.Column("partner_id", sa.Uuid(), sa.ForeignKey("partners.id"), nullable=True),
        sa.Column("contract_id", sa.Uuid(), nullable=True),
    )
    op.create_index("ix_authorization_terms_status", "authorization_terms", ["status"])
    op.create_index("ix_authorization_terms_contract_id", "authorization_terms", ["contract_id"])

    op.create_table(
        "contracts",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("client_name", sa.String(), nullable=False),
        sa.Column("client_email", sa.String(), nullable=True),
        sa.Column("client_phone", sa.String(length=32), nullable=True),
        sa.Column("client_document", sa.String(length=18), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        _money("value", nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("terms", sa.String(), nullable=True),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("template_type", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("authorization_term_signed", sa.Boolean(), nullable=False),
        sa.Column(
            "authorization_term_id",
            sa.Uuid(),
            sa.ForeignKey("authorization_terms.id"),
            nullable=True,
        ),
        sa.Column("client_signature", sa.String(), nullable=True),
        sa.Column("signer_name", sa.String(), nullable=True),
        sa.Column("client_ip_address", sa.String(length=64), nullable=True),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("link_token", sa.String(length=96), nullable=True, unique=True),
        sa.Column("link_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("signature_link", sa.String(), nullable=True),
        sa.Column("partner_id", sa.Uuid(), sa.ForeignKey("partners.id"), nullable=True),
        _money("partner_commission"),
        sa.Column("customer_id", sa.Uuid(), sa.ForeignKey("customers.id"), nullable=True),
    )
    op.create_index("ix_contracts_client_name", "contracts", ["client_name"])
    op.create_index("ix_contracts_status", "contracts", ["status"])
    op.create_index("ix_contracts_partner_id", "contracts", ["partner_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("external_id", sa.String(length=64), nullable=False, unique=True),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("customer_email", sa.String(), nullable=True),
        sa.Column("customer_phone", sa.String(length=32), nullable=True),
        sa.Column("customer_document", sa.String(length=18), nullable=False),
        _money("value", nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("billing_type", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("invoice_url", sa.String(), nullable=True),
        sa.Column("bank_slip_url", sa.String(), nullable=True),
        sa.Column("pix_code", sa.Text(), nullable=True),
        sa.Column("is_simulation", sa.Boolean(), nullable=False),
        sa.Column("contract_id", sa.Uuid(), sa.ForeignKey("contracts.id"), nullable=True),
    )
    op.create_index("ix_payments_status", "payments", ["status"])
    op.create_index("ix_payments_customer_document", "payments", ["customer_document"])

    op.create_table(
        "opportunities",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("customer_id", sa.Uuid(), sa.ForeignKey("customers.id"), nullable=True),
        sa.Column("partner_id", sa.Uuid(), sa.ForeignKey("partners.id"), nullable=True),
        _money("value", nullable=False),
        sa.Column("stage", sa.String(), nullable=False),
        sa.Column("probability", sa.Integer(), nullable=False),
        sa.Column("expected_close_date", sa.Date(), nullable=True),
    )
    op.create_index("ix_opportunities_stage", "opportunities", ["stage"])

    op.create_table(
        "activities",
        sa.Column("id", sa.Uuid(), primary_key=True),
        *_timestamps(),
        sa.Column("type", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        _money("value"),
        sa.Column("related_id", sa.Uuid(), nullable=True),
    )
    op.create_index("ix_activities_type", "activities", ["type"])
    op.create_index("ix_activities_created_at", "activities", ["created_at"])


def downgrade() -> None:
    for table in (
        "activities",
        "opportunities",
        "payments",
        "contracts",
        "authorization_terms",
        "customers",
        "partners",
        "users",
    ):
        op.drop_table(table)
