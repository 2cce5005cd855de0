"""Unit tests for the OTP code repository."""

from datetime import timedelta

import pytest

from gradii.core.database.base import utc_now
from gradii.core.database.entities.otp_codes import OtpCode

pytestmark = pytest.mark.asyncio

EMAIL = "candidate@example.com"


def _code(otp: str, purpose: str = "candidate_access", expires_in: int = 300, **kwargs) -> OtpCode:
    return OtpCode(email=EMAIL, otp=otp, purpose=purpose, expires_at=utc_now() + timedelta(seconds=expires_in), **kwargs)


async def test_get_latest_unused_skips_used_codes(repos):
    await repos.otp_codes.create(_code("111111"))
    await repos.otp_codes.create(_code("222222", used_at=utc_now()))

    latest = await repos.otp_codes.get_latest_unused(EMAIL, "candidate_access")

    assert latest.otp == "111111"
    assert await repos.otp_codes.get_latest_unused(EMAIL, "signin") is None


async def test_delete_for_only_touches_one_purpose(repos):
    await repos.otp_codes.create(_code("111111"))
    await repos.otp_codes.create(_code("222222", purpose="signin"))

    deleted = await repos.otp_codes.delete_for(EMAIL, "candidate_access")

    assert deleted == 1
    remaining = await repos.otp_codes.list(filters={"email": EMAIL})
    assert [c.purpose for c in remaining] == ["signin"]


async def test_delete_expired(repos):
    await repos.otp_codes.create(_code("111111", expires_in=-10))
    await repos.otp_codes.create(_code("222222", purpose="signin"))

    assert await repos.otp_codes.delete_expired(utc_now()) == 1
    assert len(await repos.otp_codes.list()) == 1
