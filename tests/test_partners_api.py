from decimal import Decimal

from fastapi import status

from apontt.core.config import settings
from apontt.models.partner import Partner
from apontt.services.partners import ACCESS_LOG_LIMIT, PartnerService

API = settings.api_prefix


def _create_partner(client, admin_headers, **overrides) -> dict:
    payload = {
        "name": "Parceiro Sul",
        "email": "Sul@Example.com",
        "cpf": "123.456.789-00",
        "phone": "(51) 99999-0000",
        "city": "Porto Alegre",
        "state": "RS",
    }
    payload.update(overrides)
    response = client.post(f"{API}/partners", json=payload, headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED, response.json()
    return response.json()


def test_create_partner_returns_generated_credentials(client, admin_headers):
    partner = _create_partner(client, admin_headers)

    assert partner["email"] == "sul@example.com"
    assert partner["cpf"] == "12345678900"
    assert partner["status"] == "active"
    assert Decimal(partner["admin_fee_rate"]) == settings.default_admin_fee_rate
    credentials = partner["generated_credentials"]
    assert credentials["login"] == "sul@example.com"
    assert len(credentials["password"]) >= 12

    listing = client.get(f"{API}/partners", headers=admin_headers).json()
    assert [item["id"] for item in listing] == [partner["id"]]
    assert "generated_credentials" not in listing[0]


def test_duplicate_email_conflicts(client, admin_headers):
    _create_partner(client, admin_headers)

    response = client.post(
        f"{API}/partners",
        json={"name": "Outro", "email": "sul@example.com"},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_409_CONFLICT


def test_validate_login(client, admin_headers):
    partner = _create_partner(client, admin_headers)
    password = partner["generated_credentials"]["password"]

    ok = client.post(f"{API}/partners/validate-login", json={"email": "sul@example.com", "password": password})
    assert ok.status_code == status.HTTP_200_OK
    assert ok.json()["valid"] is True
    assert ok.json()["partner"]["id"] == partner["id"]

    wrong = client.post(f"{API}/partners/validate-login", json={"email": "sul@example.com", "password": "errada"})
    assert wrong.json() == {"valid": False, "message": "Senha incorreta", "partner": None}

    missing = client.post(f"{API}/partners/validate-login", json={"email": "nao@example.com", "password": "x"})
    assert missing.json()["valid"] is False


def test_deactivate_is_soft(client, admin_headers, db_session):
    partner = _create_partner(client, admin_headers)
    password = partner["generated_credentials"]["password"]

    response = client.delete(f"{API}/partners/{partner['id']}", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "inactive"
    assert response.json()["access_enabled"] is False
    assert client.get(f"{API}/partners/{partner['id']}", headers=admin_headers).status_code == status.HTTP_200_OK
    login = client.post(f"{API}/partners/validate-login", json={"email": "sul@example.com", "password": password})
    assert login.json()["valid"] is False


def test_admin_fee_range(client, admin_headers):
    partner = _create_partner(client, admin_headers)

    ok = client.patch(f"{API}/partners/{partner['id']}/admin-fee", json={"admin_fee_rate": "12,5"}, headers=admin_headers)
    assert ok.status_code == status.HTTP_200_OK
    assert Decimal(ok.json()["admin_fee_rate"]) == Decimal("12.50")

    too_high = client.patch(f"{API}/partners/{partner['id']}/admin-fee", json={"admin_fee_rate": 150}, headers=admin_headers)
    assert too_high.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_dashboard_link_and_access_control(client, admin_headers):
    partner = _create_partner(client, admin_headers)

    link = client.post(f"{API}/partners/{partner['id']}/generate-dashboard-token", headers=admin_headers)
    assert link.status_code == status.HTTP_200_OK
    token = link.json()["dashboard_token"]
    assert token.startswith("pt_")
    assert link.json()["dashboard_url"] == f"https://crm.example.com/partner-dashboard/{token}"

    dashboard = client.get(f"{API}/public/partner/{token}")
    assert dashboard.status_code == status.HTTP_200_OK
    body = dashboard.json()
    assert body["partner"]["access_count"] == 1
    assert body["stats"]["total_contracts"] == 0

    client.patch(f"{API}/partners/{partner['id']}/access", json={"access_enabled": False}, headers=admin_headers)
    denied = client.get(f"{API}/public/partner/{token}")
    assert denied.status_code == status.HTTP_403_FORBIDDEN
    assert denied.json()["error"] == "access_denied"

    assert client.get(f"{API}/public/partner/pt_desconhecido").status_code == status.HTTP_404_NOT_FOUND


def test_access_log_is_capped(db_session):
    partner = Partner(name="Parceiro", email="p@example.com")
    db_session.add(partner)
    db_session.commit()
    service = PartnerService(db_session)

    for _ in range(ACCESS_LOG_LIMIT + 5):
        service.register_access(partner)

    assert partner.access_count == ACCESS_LOG_LIMIT + 5
    assert len(partner.access_log) == ACCESS_LOG_LIMIT
