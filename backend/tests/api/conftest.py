"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from crm_api.core.security import create_access_token
from crm_api.main import create_app
from crm_api.services.authorization import FULL_ALL_ACCESS, FULL_COMPANY_ACCESS, CallerInfo


def make_headers(company_id: int = 7, user_id: int = 1, sections=()) -> dict:
    token = create_access_token(CallerInfo(company_id, user_id, frozenset(sections)))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client():
    """Create a test client; the lifespan builds a fresh in-memory database."""
    with TestClient(create_app()) as client:
        yield client


@pytest.fixture
def auth_headers():
    """A plain user of company 7."""
    return make_headers()


@pytest.fixture
def company_admin_headers():
    return make_headers(company_id=7, user_id=4, sections=[FULL_COMPANY_ACCESS])


@pytest.fixture
def stranger_headers():
    return make_headers(company_id=8, user_id=2)


@pytest.fixture
def stranger_admin_headers():
    return make_headers(company_id=8, user_id=5, sections=[FULL_COMPANY_ACCESS])


@pytest.fixture
def admin_headers():
    return make_headers(company_id=1, user_id=3, sections=[FULL_ALL_ACCESS])


@pytest.fixture
def references(client, company_admin_headers):
    """A warehouse and a supplier owned by company 7."""
    warehouse = client.post("/api/warehouses", json={"name": "Main"}, headers=company_admin_headers)
    supplier = client.post("/api/suppliers", json={"name": "Acme Metals"}, headers=company_admin_headers)
    assert warehouse.status_code == 201
    assert supplier.status_code == 201
    return {"warehouse_id": warehouse.json()["id"], "supplier_id": supplier.json()["id"]}


@pytest.fixture
def headers_for():
    """Build headers for an arbitrary caller."""
    return make_headers
