"""Domain models for the unified interview flow."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..base import BaseSchema
from .analysis import InterviewAnalysis
from .enums import FlowStatus, FlowType, InterviewType, QuestionType
from .questions import Question


def _utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


class AnswerScore(BaseSchema):
    """Uniform result of scoring one answer, whatever the question type."""

    score: float
    max_score: float
    is_correct: Optional[bool] = None
    feedback: str = ""
    breakdown: Dict[str, float] = Field(default_factory=dict)
    analysis: Dict[str, Any] = Field(default_factory=dict)


class AnswerRecord(BaseSchema):
    """An answer submitted within a flow, together with its score."""

    question_id: str
    question_type: QuestionType
    answer: Any = None
    time_spent: float = 0
    submitted_at: datetime = Field(default_factory=_utc_now)
    score: AnswerScore


class InterviewFlow(BaseSchema):
    """
    State of one candidate stepping through one interview.

    A flow is linear: question ``current_index`` must be answered before the
    next one becomes current. Operations never mutate a flow in place; they
    return an updated copy.
    """

    interview_id: str
    candidate_email: str
    interview_type: InterviewType
    flow_type: FlowType = FlowType.direct

    status: FlowStatus = FlowStatus.in_progress
    questions: List[Question]
    current_index: int = 0
    answers: List[AnswerRecord] = Field(default_factory=list)

    started_at: datetime = Field(default_factory=_utc_now)
    completed_at: Optional[datetime] = None
    time_limit_minutes: Optional[int] = None

    passing_score: int = 70
    programming_language: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == FlowStatus.completed

    @property
    def total_questions(self) -> int:
        return len(self.questions)


class FlowProgress(BaseSchema):
    current_question: int
    total_questions: int
    answered: int
    remaining: int
    percentage: float
    time_spent_seconds: float
    status: FlowStatus


class QuestionResult(BaseSchema):
    """Per-question line of a completed interview's result."""

    question_id: str
    question_type: QuestionType
    question: str
    answered: bool
    answer: Any = None
    time_spent: float = 0
    score: float
    max_score: float
    is_correct: Optional[bool] = None
    feedback: str


class InterviewResult(BaseSchema):
    """Aggregated outcome of a completed interview."""

    interview_id: str
    candidate_email: str
    interview_type: InterviewType
    flow_type: FlowType
    total_score: float
    max_score: float
    percentage: float
    passed: bool
    passing_score: int
    answered_questions: int
    total_questions: int
    duration_seconds: int
    completed_at: datetime
    questions: List[QuestionResult] = Field(default_factory=list)
    analysis: InterviewAnalysis
