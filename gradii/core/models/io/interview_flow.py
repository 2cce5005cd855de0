"""
Interview flow I/O models for API requests and responses.

The flow endpoint takes an ``action`` and dispatches to the unified interview
service. Flows are never returned whole: questions carry answers, so the
response exposes a summary plus the candidate view of the current question.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from ..domain.enums import FlowStatus, FlowType, InterviewType
from ..domain.flow import FlowProgress, InterviewFlow, InterviewResult


class FlowRequest(BaseModel):
    """Schema for a flow action."""

    action: str = Field(description="initialize, submit_answer, get_progress or complete")
    interview_id: str = Field(min_length=1, description="Public interview id")
    interview_type: Optional[InterviewType] = Field(default=None, description="Expected interview type")
    question_id: Optional[str] = Field(default=None, description="Question being answered (submit_answer)")
    answer: Any = Field(default=None, description="Option id, code or prose depending on the question type")
    time_spent: float = Field(default=0, description="Seconds spent on the question")
    language: Optional[str] = Field(default=None, description="Language of a coding answer")


class FlowSummary(BaseModel):
    """Public view of an interview flow."""

    interview_id: str
    candidate_email: str
    interview_type: InterviewType
    flow_type: FlowType
    status: FlowStatus
    current_index: int
    total_questions: int
    answered: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    time_limit_minutes: Optional[int] = None
    passing_score: int

    @classmethod
    def from_flow(cls, flow: InterviewFlow) -> "FlowSummary":
        return cls(
            interview_id=flow.interview_id,
            candidate_email=flow.candidate_email,
            interview_type=flow.interview_type,
            flow_type=flow.flow_type,
            status=flow.status,
            current_index=flow.current_index,
            total_questions=flow.total_questions,
            answered=len(flow.answers),
            started_at=flow.started_at,
            completed_at=flow.completed_at,
            time_limit_minutes=flow.time_limit_minutes,
            passing_score=flow.passing_score,
        )


class FlowResponse(BaseModel):
    success: bool = True
    flow: Optional[FlowSummary] = None
    current_question: Optional[Dict[str, Any]] = None
    progress: Optional[FlowProgress] = None
    is_completed: Optional[bool] = None
    analysis_result: Optional[InterviewResult] = None


class FlowResultsResponse(BaseModel):
    success: bool = True
    has_results: bool
    analysis_result: Optional[Dict[str, Any]] = None


class InterviewCompletionSummary(BaseModel):
    """Result card shown after an interview was submitted."""

    interview_id: str
    title: str
    job_position: str
    company_name: Optional[str] = None
    interview_type: str
    score: int
    max_score: int
    passed: bool
    total_questions: int
    answered_questions: int
    duration_seconds: int
    candidate_email: Optional[str] = None
    completed_at: Optional[datetime] = None
    status: str
