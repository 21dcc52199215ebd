"""Emissão e resolução dos tokens dos links públicos (assinatura e painel do parceiro)."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeVar

from sqlmodel import Session, select

from apontt.core.config import settings
from apontt.core.exceptions import ConflictError, LinkExpiredError, NotFoundError
from apontt.models.base import as_utc, utcnow
from apontt.models.contract import AuthorizationTerm, Contract
from apontt.models.partner import Partner

CONTRACT_PREFIX = "ct_"
TERM_PREFIX = "at_"
PARTNER_PREFIX = "pt_"

# 32 bytes = 256 bits de entropia
TOKEN_BYTES = 32
MAX_ISSUE_ATTEMPTS = 5

Linkable = TypeVar("Linkable", Contract, AuthorizationTerm)


@dataclass
class IssuedLink:
    token: str
    url: str
    expires_at: datetime | None


def generate_token(prefix: str) -> str:
    return f"{prefix}{secrets.token_urlsafe(TOKEN_BYTES)}"


class LinkIssuer:
    def __init__(self, session: Session, *, ttl_hours: int | None = None, base_url: str | None = None) -> None:
        self.session = session
        self.ttl_hours = ttl_hours if ttl_hours is not None else settings.signature_link_ttl_hours
        self.base_url = (base_url or settings.resolved_public_app_url()).rstrip("/")

    # Emissão ---------------------------------------------------------------
    def issue_for_contract(self, contract: Contract) -> IssuedLink:
        return self._issue(contract, Contract, CONTRACT_PREFIX, "sign")

    def issue_for_term(self, term: AuthorizationTerm) -> IssuedLink:
        return self._issue(term, AuthorizationTerm, TERM_PREFIX, "sign-term")

    def issue_for_partner(self, partner: Partner) -> IssuedLink:
        token = self._unique_token(Partner, Partner.dashboard_token, PARTNER_PREFIX)
        partner.dashboard_token = token
        self.session.add(partner)
        return IssuedLink(token=token, url=self.partner_dashboard_url(token), expires_at=None)

    def partner_dashboard_url(self, token: str) -> str:
        return f"{self.base_url}/partner-dashboard/{token}"

    def _issue(self, entity: Linkable, model: type[Linkable], prefix: str, path: str) -> IssuedLink:
        token = self._unique_token(model, model.link_token, prefix)
        expires_at = None
        if self.ttl_hours:
            expires_at = utcnow() + timedelta(hours=self.ttl_hours)
        url = f"{self.base_url}/{path}/{token}"
        entity.link_token = token
        entity.link_expires_at = expires_at
        entity.signature_link = url
        self.session.add(entity)
        return IssuedLink(token=token, url=url, expires_at=expires_at)

    def _unique_token(self, model, column, prefix: str) -> str:
        for _ in range(MAX_ISSUE_ATTEMPTS):
            candidate = generate_token(prefix)
            exists = self.session.exec(select(model.id).where(column == candidate)).first()
            if exists is None:
                return candidate
        raise ConflictError("Could not issue a unique access token")

    # Resolução -------------------------------------------------------------
    def resolve_contract(self, token: str) -> Contract:
        contract = self._lookup(Contract, Contract.link_token, token, CONTRACT_PREFIX)
        self._ensure_not_expired(contract.link_expires_at)
        return contract

    def resolve_term(self, token: str) -> AuthorizationTerm:
        term = self._lookup(AuthorizationTerm, AuthorizationTerm.link_token, token, TERM_PREFIX)
        self._ensure_not_expired(term.link_expires_at)
        return term

    def resolve_partner(self, token: str) -> Partner:
        return self._lookup(Partner, Partner.dashboard_token, token, PARTNER_PREFIX)

    def _lookup(self, model, column, token: str, prefix: str):
        candidate = (token or "").strip()
        if not candidate or not candidate.startswith(prefix):
            raise NotFoundError("Link not found")
        entity = self.session.exec(select(model).where(column == candidate)).first()
        if entity is None:
            raise NotFoundError("Link not found")
        return entity

    @staticmethod
    def _ensure_not_expired(expires_at: datetime | None) -> None:
        if expires_at is not None and as_utc(expires_at) < utcnow():
            raise LinkExpiredError("This link has expired")
