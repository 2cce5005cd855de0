"""Domain models for overall interview analysis."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

from .enums import Recommendation


class AnalysisDraft(BaseModel):
    """Structured analysis requested from the LLM."""

    summary: str = Field(description="Two to four sentence assessment of the candidate's performance")
    strengths: List[str] = Field(default_factory=list, description="Concrete strengths shown in the answers")
    improvements: List[str] = Field(default_factory=list, description="Concrete areas to improve")
    recommendation: Recommendation = Field(description="Hiring recommendation")


class InterviewAnalysis(AnalysisDraft):
    """Analysis attached to an interview result, with its provenance."""

    generated_by: Literal["llm", "rules"] = "rules"
