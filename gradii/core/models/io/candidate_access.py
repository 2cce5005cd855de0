"""
Candidate access I/O models for API requests and responses.

These schemas define the contract of the OTP-gated access endpoints under
``/api/v1/interview``: email verification, OTP verification and session
maintenance.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..domain.session import CandidateLocation


def _normalize_email(value: str) -> str:
    email = value.strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValueError("Invalid email address")
    return email


class VerifyEmailRequest(BaseModel):
    """Schema for requesting an OTP for a candidate email."""

    email: str = Field(description="Candidate email address")

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)


class VerifyEmailResponse(BaseModel):
    success: bool = True
    message: str
    email: str
    expires_in_seconds: int = Field(description="Seconds until the issued OTP expires")
    email_sent: bool = Field(description="Whether the OTP email was handed to the mail server")


class VerifyOTPRequest(BaseModel):
    """Schema for exchanging an OTP for an interview session."""

    email: str = Field(description="Candidate email address")
    otp: str = Field(description="Six digit one-time passcode")
    interview_id: Optional[str] = Field(default=None, description="Interview to bind the session to")
    interview_type: Optional[str] = Field(default=None, description="Interview type shown to the candidate")

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("otp")
    @classmethod
    def strip_otp(cls, value: str) -> str:
        return value.strip()


class UpdateSessionRequest(BaseModel):
    """Schema for recording proctoring data on the current session."""

    face_verification_data: Optional[Dict[str, Any]] = None
    candidate_location: Optional[CandidateLocation] = None
    interview_id: Optional[str] = None
    interview_type: Optional[str] = None


class SessionSummary(BaseModel):
    """The parts of an interview session that are safe to show the candidate."""

    email: str
    interview_id: Optional[str] = None
    interview_type: Optional[str] = None
    verified: bool
    created_at: datetime
    last_activity: datetime
    expires_at: datetime
    face_verified: bool = False
    location_recorded: bool = False


class SessionResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    session: Optional[SessionSummary] = None
