"""Domain enums for interview models."""

from __future__ import annotations

from enum import Enum


class InterviewType(str, Enum):
    """Kind of question set an interview carries. ``combo`` mixes the other three."""

    mcq = "mcq"
    coding = "coding"
    behavioral = "behavioral"
    combo = "combo"


class QuestionType(str, Enum):
    mcq = "mcq"
    coding = "coding"
    behavioral = "behavioral"


class FlowType(str, Enum):
    """Whether an interview was sent directly or scheduled through a job campaign."""

    direct = "direct"
    campaign = "campaign"


class FlowStatus(str, Enum):
    in_progress = "in_progress"
    completed = "completed"


class InterviewStatus(str, Enum):
    """Lifecycle status stored on the ``interviews`` table."""

    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class OtpPurpose(str, Enum):
    signup = "signup"
    signin = "signin"
    candidate_access = "candidate_access"


class Recommendation(str, Enum):
    """Hiring recommendation attached to an interview analysis."""

    strong_hire = "strong_hire"
    hire = "hire"
    maybe = "maybe"
    no_hire = "no_hire"
