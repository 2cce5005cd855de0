"""Overall analysis of a completed interview.

The analyzer supports two modes:

- ``model=None``: deterministic rule-based analysis derived from the
  per-question scores. This is what tests and deployments without an LLM use.
- ``model!=None``: uses Pydantic AI to write the summary, strengths,
  improvements and recommendation. Any failure falls back to the rules.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic_ai import Agent

from gradii.core.logging_config import get_logger
from gradii.core.models.domain import (
    AnalysisDraft,
    InterviewAnalysis,
    InterviewFlow,
    QuestionResult,
    QuestionType,
    Recommendation,
)
from gradii.core.monitoring import log_llm_call

logger = get_logger(__name__)

_TYPE_LABELS = {
    QuestionType.mcq: "multiple-choice",
    QuestionType.coding: "coding",
    QuestionType.behavioral: "behavioral",
}

_SYSTEM_PROMPT = (
    "You are an experienced technical recruiter reviewing a candidate's interview. "
    "Judge only from the scored answers you are given. Be specific and fair, "
    "and keep strengths and improvements to at most four short items each."
)


def recommendation_for(percentage: float) -> Recommendation:
    if percentage >= 85:
        return Recommendation.strong_hire
    if percentage >= 70:
        return Recommendation.hire
    if percentage >= 50:
        return Recommendation.maybe
    return Recommendation.no_hire


def _ratio(result: QuestionResult) -> float:
    return result.score / result.max_score if result.max_score else 0.0


def rule_based_analysis(flow: InterviewFlow, results: List[QuestionResult], percentage: float) -> InterviewAnalysis:
    """Build an analysis from scores alone."""
    answered = [r for r in results if r.answered]
    strong = [r for r in answered if _ratio(r) >= 0.75]
    weak = [r for r in results if _ratio(r) < 0.5]

    strengths: List[str] = []
    improvements: List[str] = []
    for question_type in QuestionType:
        typed = [r for r in results if r.question_type == question_type]
        if not typed:
            continue
        typed_pct = sum(r.score for r in typed) / sum(r.max_score for r in typed) * 100
        label = _TYPE_LABELS[question_type]
        if typed_pct >= 70:
            strengths.append(f"Strong {label} performance ({typed_pct:.0f}%)")
        elif typed_pct < 50:
            improvements.append(f"Improve {label} answers ({typed_pct:.0f}%)")

    if strong and not strengths:
        strengths.append(f"Answered {len(strong)} question(s) with a high score")
    unanswered = len(results) - len(answered)
    if unanswered:
        improvements.append(f"{unanswered} question(s) were left unanswered")
    if weak and not improvements:
        improvements.append(f"Review the topics behind {len(weak)} low-scoring answer(s)")

    recommendation = recommendation_for(percentage)
    passed = percentage >= flow.passing_score
    summary = (
        f"The candidate scored {percentage:.1f}% across {len(results)} question(s), "
        f"answering {len(answered)}. "
        f"This is {'at or above' if passed else 'below'} the passing score of {flow.passing_score}%."
    )
    return InterviewAnalysis(
        summary=summary,
        strengths=strengths,
        improvements=improvements,
        recommendation=recommendation,
        generated_by="rules",
    )


def _describe(results: List[QuestionResult]) -> str:
    lines = []
    for i, r in enumerate(results, start=1):
        answer = "(no answer)" if not r.answered else str(r.answer)[:1500]
        lines.append(
            f"Q{i} [{r.question_type.value}] {r.question}\n"
            f"Answer: {answer}\n"
            f"Score: {r.score}/{r.max_score}\n"
            f"Feedback: {r.feedback[:600]}"
        )
    return "\n\n".join(lines)


class InterviewAnalyzer:
    """Produces the overall ``InterviewAnalysis`` of a completed interview."""

    def __init__(self, *, model: Any | None = None) -> None:
        """
        Args:
            model: A pydantic-ai model or model string (e.g. ``"openai:gpt-4o"``).
                   If None, only the rule-based analysis is used.
        """
        self._model = model

    async def analyze(
        self, flow: InterviewFlow, results: List[QuestionResult], percentage: float
    ) -> InterviewAnalysis:
        if self._model is None:
            return rule_based_analysis(flow, results, percentage)

        draft: Optional[AnalysisDraft] = None
        try:
            agent: Agent = Agent(self._model, output_type=AnalysisDraft, system_prompt=_SYSTEM_PROMPT)
            result = await agent.run(
                (
                    f"Interview type: {flow.interview_type.value}\n"
                    f"Overall score: {percentage:.1f}% (passing score {flow.passing_score}%)\n\n"
                    f"{_describe(results)}"
                )
            )
            draft = result.output
            log_llm_call(str(self._model), "interview_analysis", True)
        except Exception as e:
            logger.warning(f"LLM interview analysis failed, using rule-based analysis: {e}")
            log_llm_call(str(self._model), "interview_analysis", False)
            return rule_based_analysis(flow, results, percentage)

        return InterviewAnalysis(**draft.model_dump(), generated_by="llm")
