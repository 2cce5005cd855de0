from datetime import timedelta

import pytest
from httpx import AsyncClient

from gradii.core.database.base import utc_now
from gradii.core.database.entities import OtpCode

pytestmark = pytest.mark.asyncio


async def test_active_session_count(client: AsyncClient, admin_headers, candidate_headers):
    await candidate_headers("a@example.com")
    await candidate_headers("b@example.com")

    response = await client.get("/api/v1/admin/sessions", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"active_sessions": 2}


async def test_cleanup_removes_expired_otps(client: AsyncClient, admin_headers, repos):
    await repos.otp_codes.create(
        OtpCode(email="a@example.com", otp="123456", purpose="candidate_access", expires_at=utc_now() - timedelta(1))
    )
    await repos.otp_codes.create(
        OtpCode(email="b@example.com", otp="654321", purpose="candidate_access", expires_at=utc_now() + timedelta(1))
    )

    response = await client.post("/api/v1/admin/sessions/cleanup", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "expired_sessions_removed": 0, "expired_otps_removed": 1}
    assert len(await repos.otp_codes.list()) == 1
