"""
One-time passcodes for candidate access.

Codes live in the ``otp_codes`` table. Issuing a code replaces any earlier
code for the same (email, purpose). A code verifies at most once, must be
used before it expires and tolerates a bounded number of wrong guesses.
"""

from __future__ import annotations

import re
import secrets
from datetime import timedelta

from gradii.core.database.base import utc_now
from gradii.core.database.entities import OtpCode
from gradii.core.database.repositories import OtpCodeRepository
from gradii.core.errors import ValidationError
from gradii.core.logging_config import get_logger

logger = get_logger(__name__)

_OTP_FORMAT = re.compile(r"^\d{6}$")


def generate_otp() -> str:
    """Return a random 6 digit code in 100000..999999."""
    return str(100000 + secrets.randbelow(900000))


class OTPService:
    """Issue and verify one-time passcodes."""

    def __init__(self, repository: OtpCodeRepository, ttl_seconds: int = 300, max_attempts: int = 3) -> None:
        self._repository = repository
        self.ttl_seconds = ttl_seconds
        self.max_attempts = max_attempts

    async def issue(self, email: str, purpose: str) -> OtpCode:
        """Replace any earlier code for (email, purpose) with a fresh one.

        Returns:
            The stored OtpCode
        """
        email = email.strip().lower()
        await self._repository.delete_for(email, purpose)
        code = OtpCode(
            email=email,
            otp=generate_otp(),
            purpose=purpose,
            expires_at=utc_now() + timedelta(seconds=self.ttl_seconds),
            max_attempts=self.max_attempts,
        )
        code = await self._repository.create(code)
        logger.info(f"OTP issued for {email} (purpose={purpose})")
        return code

    async def verify(self, email: str, otp: str, purpose: str) -> OtpCode:
        """Check a submitted code.

        Args:
            email: Email the code was issued to
            otp: Submitted code
            purpose: Purpose the code was issued for

        Returns:
            The consumed OtpCode

        Raises:
            ValidationError: If the code is malformed, missing, expired,
                exhausted or wrong. A wrong code counts as an attempt.
        """
        otp = (otp or "").strip()
        if not _OTP_FORMAT.match(otp):
            raise ValidationError("Invalid OTP format")

        email = email.strip().lower()
        record = await self._repository.get_latest_unused(email, purpose)
        if record is None:
            raise ValidationError("Invalid or expired OTP")
        if record.expires_at <= utc_now():
            raise ValidationError("OTP expired. Request a new OTP.")
        if record.attempts >= record.max_attempts:
            raise ValidationError("Too many attempts. Request a new OTP.")

        if not secrets.compare_digest(record.otp, otp):
            record.attempts += 1
            await self._repository.update(record)
            logger.info(f"Wrong OTP for {email} (attempt {record.attempts}/{record.max_attempts})")
            raise ValidationError(
                "Invalid OTP",
                details={"attempts_remaining": max(0, record.max_attempts - record.attempts)},
            )

        record.used_at = utc_now()
        return await self._repository.update(record)

    async def cleanup_expired(self) -> int:
        """Delete expired codes and return how many were removed."""
        removed = await self._repository.delete_expired(utc_now())
        if removed:
            logger.info(f"Removed {removed} expired OTP codes")
        return removed
