"""Domain models for candidate interview sessions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from ..base import BaseSchema


class CandidateLocation(BaseSchema):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None
    timestamp: Optional[datetime] = None


class InterviewSession(BaseSchema):
    """
    An OTP-verified candidate session stored in Redis.

    The session id travels in an httpOnly cookie; everything else stays
    server side.
    """

    id: str
    email: str
    interview_id: Optional[str] = None
    interview_type: Optional[str] = None
    purpose: str = "interview_access"
    verified: bool = True

    created_at: datetime
    last_activity: datetime
    expires_at: datetime

    candidate_location: Optional[CandidateLocation] = None
    candidate_ip: Optional[str] = None
    user_agent: Optional[str] = None
    face_verification_data: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
