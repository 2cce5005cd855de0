"""
Job campaign entity models.

A campaign groups candidates applying for one job. Each campaign defines interview
rounds (``InterviewSetup``); scheduling a round for a candidate creates an
``Interview`` row plus a ``CampaignInterview`` that tracks the round's outcome.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlmodel import Field, Text

from ..base import Base, UTCDateTime, utc_now


def _uuid() -> str:
    return str(uuid4())


class JobCampaign(Base, table=True):
    """Entity for a hiring campaign.

    Table: job_campaigns
    """

    __tablename__ = "job_campaigns"

    id: str = Field(default_factory=_uuid, primary_key=True, max_length=36)
    company_id: str = Field(foreign_key="companies.id", max_length=36, index=True)
    campaign_name: str = Field(max_length=255)
    job_title: str = Field(max_length=255)
    job_description: str = Field(default="", sa_type=Text)
    status: str = Field(default="active", max_length=50, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class Candidate(Base, table=True):
    """Entity for a candidate applying to a campaign.

    Table: candidates
    """

    __tablename__ = "candidates"

    id: str = Field(default_factory=_uuid, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="job_campaigns.id", max_length=36, index=True)
    name: str = Field(max_length=255)
    email: str = Field(max_length=255, index=True)
    source: str = Field(default="manual", max_length=100)
    # applied, screening, interview, hired, rejected
    status: str = Field(default="applied", max_length=50)
    applied_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class InterviewSetup(Base, table=True):
    """Entity for one interview round of a campaign.

    Table: interview_setups
    """

    __tablename__ = "interview_setups"

    id: str = Field(default_factory=_uuid, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="job_campaigns.id", max_length=36, index=True)
    round_number: int
    round_name: str = Field(max_length=255)
    interview_type: str = Field(max_length=100)
    time_limit: int = Field(description="Time limit in minutes")
    number_of_questions: int
    difficulty_level: str = Field(default="Medium", max_length=100)
    passing_score: int = Field(default=70)
    instructions: Optional[str] = Field(default=None, sa_type=Text)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)


class CampaignInterview(Base, table=True):
    """Entity tracking a scheduled campaign round for one candidate.

    Table: campaign_interviews
    """

    __tablename__ = "campaign_interviews"

    id: str = Field(default_factory=_uuid, primary_key=True, max_length=36)
    campaign_id: str = Field(foreign_key="job_campaigns.id", max_length=36, index=True)
    candidate_id: str = Field(foreign_key="candidates.id", max_length=36, index=True)
    setup_id: Optional[str] = Field(default=None, foreign_key="interview_setups.id", max_length=36)
    interview_id: str = Field(max_length=255, index=True)
    interview_type: str = Field(max_length=100)
    # scheduled, in_progress, completed, cancelled
    status: str = Field(default="scheduled", max_length=50)
    score: Optional[int] = Field(default=None)
    feedback: Optional[str] = Field(default=None, sa_type=Text)
    scheduled_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    completed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
