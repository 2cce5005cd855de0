import pytest
from httpx import AsyncClient

from gradii.server.core.config import settings

pytestmark = pytest.mark.asyncio

ADMIN_ENDPOINTS = [
    ("GET", "/api/v1/interviews"),
    ("GET", "/api/v1/companies/some-id"),
    ("GET", "/api/v1/analytics/interviews"),
    ("GET", "/api/v1/admin/sessions"),
    ("POST", "/api/v1/admin/sessions/cleanup"),
]


@pytest.mark.parametrize("method,path", ADMIN_ENDPOINTS)
async def test_admin_endpoints_require_key(client: AsyncClient, method, path):
    response = await client.request(method, path)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


async def test_wrong_key_is_rejected(client: AsyncClient):
    response = await client.get("/api/v1/interviews", headers={"X-API-Key": "wrong"})

    assert response.status_code == 401


async def test_admin_api_disabled_without_configured_key(client: AsyncClient, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", None)

    response = await client.get("/api/v1/interviews", headers=admin_headers)

    assert response.status_code == 403
