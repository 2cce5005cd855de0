"""Domain models and enums shared by the interview, access and server layers.

The models are explicit and serializable so they can be:

- stored as JSON in Redis (flows, sessions),
- persisted as result documents in SQL storage,
- returned through the HTTP API.
"""

from .analysis import AnalysisDraft, InterviewAnalysis
from .enums import (
    FlowStatus,
    FlowType,
    InterviewStatus,
    InterviewType,
    OtpPurpose,
    QuestionType,
    Recommendation,
)
from .flow import (
    AnswerRecord,
    AnswerScore,
    FlowProgress,
    InterviewFlow,
    InterviewResult,
    QuestionResult,
)
from .questions import (
    BehavioralQuestion,
    CodingExample,
    CodingQuestion,
    CodingTestCase,
    MCQOption,
    MCQQuestion,
    Question,
)
from .session import CandidateLocation, InterviewSession

__all__ = [
    "AnalysisDraft",
    "AnswerRecord",
    "AnswerScore",
    "BehavioralQuestion",
    "CandidateLocation",
    "CodingExample",
    "CodingQuestion",
    "CodingTestCase",
    "FlowProgress",
    "FlowStatus",
    "FlowType",
    "InterviewAnalysis",
    "InterviewFlow",
    "InterviewResult",
    "InterviewSession",
    "InterviewStatus",
    "InterviewType",
    "MCQOption",
    "MCQQuestion",
    "OtpPurpose",
    "Question",
    "QuestionResult",
    "QuestionType",
    "Recommendation",
]
