from __future__ import annotations

import uuid
from decimal import Decimal

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine

from apontt.api.deps import get_db
from apontt.core.config import settings
from apontt.db import session as db_session_module
from apontt.main import app
from apontt.models.user import User
from apontt.schemas.contract import ContractCreate
from apontt.utils.security import get_password_hash

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "Senha@123"


@pytest.fixture(autouse=True)
def simulation_settings(monkeypatch):
    monkeypatch.setattr(settings, "asaas_api_key", None)
    monkeypatch.setattr(settings, "signature_link_ttl_hours", None)
    monkeypatch.setattr(settings, "public_app_url", "https://crm.example.com")


@pytest.fixture()
def db_engine(tmp_path):
    db_path = tmp_path / f"test_{uuid.uuid4().hex}.db"
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(bind=engine)

    original_engine = db_session_module.engine
    db_session_module.engine = engine

    def override_dependency():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_dependency

    yield engine

    app.dependency_overrides.pop(get_db, None)
    db_session_module.engine = original_engine
    engine.dispose()


@pytest.fixture()
def client(db_engine) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(db_engine) -> Session:
    with Session(db_engine) as session:
        yield session


@pytest.fixture()
def admin_user(db_session) -> User:
    user = User(username=ADMIN_USERNAME, password_hash=get_password_hash(ADMIN_PASSWORD))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def admin_headers(client, admin_user) -> dict[str, str]:
    response = client.post(
        f"{settings.api_prefix}/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == status.HTTP_200_OK, response.json()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def contract_payload(**overrides) -> dict:
    payload = {
        "client_name": "Maria Silva",
        "client_document": "123.456.789-00",
        "client_email": "maria@example.com",
        "client_phone": "(11) 98765-4321",
        "type": "consultoria",
        "value": "500.00",
        "description": "Service",
    }
    payload.update(overrides)
    return payload


def make_contract_create(**overrides) -> ContractCreate:
    return ContractCreate(**contract_payload(**overrides))


def as_decimal(value) -> Decimal:
    return Decimal(str(value))
