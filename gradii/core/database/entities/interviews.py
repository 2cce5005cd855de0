"""
Interview entity models.

This module contains the interview a candidate takes. The question set is stored
as JSON text and parsed into typed questions by ``gradii.interview.questions``.
Direct interviews have no campaign; campaign interviews carry ``campaign_id`` and
are additionally tracked by ``CampaignInterview``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import Base, UTCDateTime, utc_now


class Interview(Base, table=True):
    """Entity for a scheduled interview.

    Table: interviews
    """

    __tablename__ = "interviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    interview_id: str = Field(max_length=255, unique=True, index=True)
    company_id: str = Field(foreign_key="companies.id", max_length=36, index=True)
    campaign_id: Optional[str] = Field(default=None, foreign_key="job_campaigns.id", max_length=36, index=True)

    # Job context
    job_position: str = Field(max_length=255)
    job_description: str = Field(default="", sa_type=Text)
    job_experience: str = Field(default="", max_length=100)

    # Question set
    interview_questions: str = Field(sa_type=Text)
    interview_type: str = Field(default="behavioral", max_length=50, index=True)
    programming_language: Optional[str] = Field(default=None, max_length=100)
    time_limit_minutes: Optional[int] = Field(default=None)

    # Candidate and scheduling
    candidate_name: Optional[str] = Field(default=None, max_length=255)
    candidate_email: Optional[str] = Field(default=None, max_length=255, index=True)
    interview_status: str = Field(default="scheduled", max_length=50, index=True)
    interview_link: Optional[str] = Field(default=None, max_length=1000)
    link_expiry_time: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"Interview(interview_id={self.interview_id}, type={self.interview_type}, status={self.interview_status})"
