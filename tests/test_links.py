from datetime import timedelta, timezone

import pytest

from apontt.core.exceptions import LinkExpiredError, NotFoundError
from apontt.models.base import as_utc, utcnow
from apontt.services.contracts import ContractService
from apontt.services.links import CONTRACT_PREFIX, LinkIssuer, generate_token
from tests.conftest import make_contract_create


def test_generated_tokens_are_prefixed_and_unguessable():
    tokens = {generate_token(CONTRACT_PREFIX) for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert token.startswith(CONTRACT_PREFIX)
        # 32 bytes em base64 url-safe
        assert len(token) >= len(CONTRACT_PREFIX) + 43


def test_issue_for_contract_builds_public_url(db_session):
    contract = ContractService(db_session).create_contract(make_contract_create())

    assert contract.link_token.startswith(CONTRACT_PREFIX)
    assert contract.signature_link == f"https://crm.example.com/sign/{contract.link_token}"
    assert contract.link_expires_at is None


def test_resolve_returns_the_linked_contract_only(db_session):
    service = ContractService(db_session)
    first = service.create_contract(make_contract_create(client_name="Maria Silva"))
    second = service.create_contract(make_contract_create(client_name="João Souza"))

    issuer = LinkIssuer(db_session)
    assert issuer.resolve_contract(first.link_token).id == first.id
    assert issuer.resolve_contract(second.link_token).id == second.id


@pytest.mark.parametrize("token", ["", "   ", "ct_desconhecido", "abc"])
def test_resolve_unknown_token_is_not_found(db_session, token):
    ContractService(db_session).create_contract(make_contract_create())
    with pytest.raises(NotFoundError):
        LinkIssuer(db_session).resolve_contract(token)


def test_contract_token_does_not_open_a_partner_dashboard(db_session):
    contract = ContractService(db_session).create_contract(make_contract_create())
    with pytest.raises(NotFoundError):
        LinkIssuer(db_session).resolve_partner(contract.link_token)


def test_expired_link_is_rejected(db_session):
    issuer = LinkIssuer(db_session, ttl_hours=1)
    service = ContractService(db_session, links=issuer)
    contract = service.create_contract(make_contract_create())
    assert contract.link_expires_at is not None

    contract.link_expires_at = utcnow() - timedelta(minutes=5)
    db_session.add(contract)
    db_session.commit()

    with pytest.raises(LinkExpiredError):
        issuer.resolve_contract(contract.link_token)


def test_link_within_ttl_resolves_after_reload(db_session):
    issuer = LinkIssuer(db_session, ttl_hours=1)
    contract = ContractService(db_session, links=issuer).create_contract(make_contract_create())
    assert contract.link_expires_at.tzinfo is not None

    db_session.expire_all()

    assert issuer.resolve_contract(contract.link_token).id == contract.id


def test_timestamps_are_timezone_aware(db_session):
    contract = ContractService(db_session).create_contract(make_contract_create())

    assert utcnow().tzinfo is timezone.utc
    assert as_utc(contract.created_at).utcoffset() == timedelta(0)
    naive = utcnow().replace(tzinfo=None)
    assert as_utc(naive) == naive.replace(tzinfo=timezone.utc)
    assert as_utc(None) is None


def test_reissuing_replaces_the_previous_token(db_session):
    service = ContractService(db_session)
    contract = service.create_contract(make_contract_create())
    old_token = contract.link_token

    link = service.issue_signature_link(contract.id)

    assert link.token != old_token
    with pytest.raises(NotFoundError):
        LinkIssuer(db_session).resolve_contract(old_token)
    assert LinkIssuer(db_session).resolve_contract(link.token).id == contract.id
