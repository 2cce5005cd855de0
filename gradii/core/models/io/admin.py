"""
Admin I/O models for API requests and responses.

These schemas back the API-key protected endpoints that create companies,
interviews and campaigns, and report on interview outcomes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.enums import InterviewType


class CompanyCreate(BaseModel):
    """Schema for creating a company via API."""

    name: str = Field(min_length=1, description="Company name")
    email: Optional[str] = Field(default=None, description="Contact email")
    domain: Optional[str] = Field(default=None, description="Email domain owned by the company")


class CompanyRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: Optional[str] = None
    domain: Optional[str] = None
    created_at: datetime


class InterviewCreate(BaseModel):
    """Schema for creating a direct interview via API."""

    company_id: str
    job_position: str = Field(min_length=1)
    job_description: str = ""
    job_experience: str = ""
    interview_type: InterviewType
    questions: Optional[List[Dict[str, Any]]] = Field(
        default=None, min_length=1, description="Question documents (camelCase or snake_case); generated when omitted"
    )
    number_of_questions: int = Field(default=5, gt=0, le=50, description="Questions to generate when none are given")
    difficulty_level: str = "Medium"
    programming_language: Optional[str] = None
    candidate_name: Optional[str] = None
    candidate_email: str
    time_limit_minutes: Optional[int] = Field(default=None, gt=0)
    link_valid_hours: Optional[int] = Field(default=72, gt=0, description="Hours until the link expires; null never")


class InterviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    interview_id: str
    company_id: str
    campaign_id: Optional[str] = None
    job_position: str
    job_experience: str
    interview_type: str
    programming_language: Optional[str] = None
    candidate_name: Optional[str] = None
    candidate_email: Optional[str] = None
    interview_status: str
    interview_link: Optional[str] = None
    link_expiry_time: Optional[datetime] = None
    time_limit_minutes: Optional[int] = None
    question_count: int = 0
    created_at: datetime


class CampaignCreate(BaseModel):
    company_id: str
    campaign_name: str = Field(min_length=1)
    job_title: str = Field(min_length=1)
    job_description: str = ""


class CampaignRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    company_id: str
    campaign_name: str
    job_title: str
    status: str
    created_at: datetime


class CandidateCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    source: str = "manual"


class CandidateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    name: str
    email: str
    source: str
    status: str
    applied_at: datetime


class InterviewSetupCreate(BaseModel):
    round_number: int = Field(ge=1)
    round_name: str = Field(min_length=1)
    interview_type: InterviewType
    time_limit: int = Field(gt=0, description="Minutes")
    number_of_questions: int = Field(gt=0)
    difficulty_level: str = "Medium"
    passing_score: int = Field(default=70, ge=0, le=100)
    instructions: Optional[str] = None


class InterviewSetupRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    round_number: int
    round_name: str
    interview_type: str
    time_limit: int
    number_of_questions: int
    difficulty_level: str
    passing_score: int
    is_active: bool


class CampaignInterviewCreate(BaseModel):
    """Schema for scheduling a campaign round for a candidate."""

    candidate_id: str
    setup_id: str
    questions: Optional[List[Dict[str, Any]]] = Field(
        default=None, min_length=1, description="Generated from the round's setup when omitted"
    )
    programming_language: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    link_valid_hours: Optional[int] = Field(default=72, gt=0)


class CampaignInterviewRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    candidate_id: str
    setup_id: Optional[str] = None
    interview_id: str
    interview_type: str
    status: str
    score: Optional[int] = None
    scheduled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class ScheduledInterviewResponse(BaseModel):
    campaign_interview: CampaignInterviewRead
    interview: InterviewRead


class InterviewTypeStats(BaseModel):
    interview_type: str
    total: int
    completed: int
    average_score: Optional[float] = None
    pass_rate: Optional[float] = None


class InterviewAnalyticsResponse(BaseModel):
    total_interviews: int
    completed_interviews: int
    completion_rate: float
    pass_rate: Optional[float] = None
    average_score: Optional[float] = None
    by_type: List[InterviewTypeStats] = Field(default_factory=list)


class SessionCleanupResponse(BaseModel):
    success: bool = True
    expired_sessions_removed: int
    expired_otps_removed: int


class ActiveSessionsResponse(BaseModel):
    active_sessions: int
