"""
Candidate interview history entity models.

One row is written when an interview flow is completed. ``feedback`` holds the
JSON document with every answer's score and the overall analysis.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlmodel import Field, Text

from ..base import Base, UTCDateTime, utc_now


class CandidateInterviewHistory(Base, table=True):
    """Entity for a completed (or otherwise finished) interview attempt.

    Table: candidate_interview_history
    """

    __tablename__ = "candidate_interview_history"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True, max_length=36)
    candidate_email: str = Field(max_length=255, index=True)
    interview_id: str = Field(max_length=255, index=True)
    interview_type: str = Field(max_length=100)
    campaign_interview_id: Optional[str] = Field(
        default=None, foreign_key="campaign_interviews.id", max_length=36
    )
    round_number: int = Field(default=1)
    round_name: Optional[str] = Field(default=None, max_length=255)

    # scheduled, in_progress, completed, cancelled, no_show
    status: str = Field(default="completed", max_length=50)
    started_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    completed_at: Optional[datetime] = Field(default=None, index=True, sa_type=UTCDateTime)
    duration: Optional[int] = Field(default=None, description="Duration in minutes")

    score: Optional[int] = Field(default=None)
    max_score: Optional[int] = Field(default=None)
    passed: Optional[bool] = Field(default=None)
    feedback: Optional[str] = Field(default=None, sa_type=Text)
    programming_language: Optional[str] = Field(default=None, max_length=100)

    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    def __repr__(self) -> str:
        return f"CandidateInterviewHistory(interview_id={self.interview_id}, score={self.score}, passed={self.passed})"
