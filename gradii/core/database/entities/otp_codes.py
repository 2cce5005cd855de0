"""
One-time passcode entity models.

OTP rows back the candidate access flow: a code is issued per (email, purpose),
expires after a short window, tolerates a bounded number of wrong guesses and
can be used at most once.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlmodel import Field

from ..base import Base, UTCDateTime, utc_now


class OtpCode(Base, table=True):
    """Entity for an issued one-time passcode.

    Table: otp_codes
    """

    __tablename__ = "otp_codes"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=36)
    email: str = Field(max_length=255, index=True)
    otp: str = Field(max_length=6)
    # signup, signin, candidate_access
    purpose: str = Field(max_length=50, index=True)
    expires_at: datetime = Field(sa_type=UTCDateTime)
    used_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    attempts: int = Field(default=0)
    max_attempts: int = Field(default=3)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"OtpCode(email={self.email}, purpose={self.purpose}, used={self.used_at is not None})"
