"""
Unified interview flow.

``UnifiedInterviewService`` drives one candidate through one interview,
whatever its type (MCQ, coding, behavioral or combo) and whether it was sent
directly or scheduled through a campaign:

1. ``initialize_interview_flow`` validates access and creates (or resumes) a flow
2. ``submit_answer`` scores the current question and advances, strictly in order
3. ``get_progress`` / ``get_current_question`` report where the candidate is
4. ``complete_interview`` aggregates scores, analyses the interview and persists the result

In-progress flows live in Redis (``FlowStore``); completed results live in
the ``candidate_interview_history`` table.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, List, Optional, Tuple

from gradii.core.database.base import utc_now
from gradii.core.database.entities import CandidateInterviewHistory, Interview, InterviewSetup
from gradii.core.database.repositories import SqlRepoBundle
from gradii.core.errors import (
    AuthorizationError,
    ConflictError,
    FlowStateError,
    LinkExpiredError,
    NotFoundError,
    ValidationError,
)
from gradii.core.logging_config import get_logger
from gradii.core.models.domain import (
    AnswerRecord,
    FlowProgress,
    FlowStatus,
    FlowType,
    InterviewFlow,
    InterviewResult,
    InterviewStatus,
    InterviewType,
    QuestionResult,
)
from gradii.core.models.io.interview_flow import InterviewCompletionSummary
from gradii.core.monitoring import log_flow_initialized, log_interview_completion

from .analysis import InterviewAnalyzer
from .flow_store import FlowStore
from .questions import candidate_view, parse_questions
from .scoring import NO_ANSWER_FEEDBACK, score_answer, unanswered_score

logger = get_logger(__name__)

_TYPE_TITLES = {"mcq": "MCQ", "coding": "Coding", "behavioral": "Behavioral", "combo": "Combo"}


class UnifiedInterviewService:
    """Single entry point for taking any interview."""

    def __init__(
        self,
        repos: SqlRepoBundle,
        store: FlowStore,
        analyzer: InterviewAnalyzer,
        *,
        default_passing_score: int = 70,
    ) -> None:
        self._repos = repos
        self._store = store
        self._analyzer = analyzer
        self._default_passing_score = default_passing_score

    # ------------------------------------------------------------------
    # Access checks
    # ------------------------------------------------------------------

    async def _load_interview(self, interview_id: str) -> Interview:
        interview = await self._repos.interviews.get_by_interview_id(interview_id)
        if interview is None:
            raise NotFoundError("Interview")
        return interview

    async def _expected_email(self, interview: Interview) -> Optional[str]:
        if interview.candidate_email:
            return interview.candidate_email
        campaign_interview = await self._repos.campaign_interviews.get_by_interview_id(interview.interview_id)
        if campaign_interview is None:
            return None
        candidate = await self._repos.candidates.get_by_id(campaign_interview.candidate_id)
        return candidate.email if candidate else None

    async def _check_access(self, interview: Interview, candidate_email: str) -> None:
        expected = await self._expected_email(interview)
        if not expected or expected.strip().lower() != candidate_email.strip().lower():
            raise AuthorizationError("This interview was not assigned to your email")
        if interview.link_expiry_time is not None and interview.link_expiry_time <= utc_now():
            raise LinkExpiredError()
        if interview.interview_status == InterviewStatus.completed.value:
            raise ConflictError("Interview has already been completed")
        if interview.interview_status == InterviewStatus.cancelled.value:
            raise ConflictError("Interview has been cancelled")

    async def _campaign_setup(self, interview: Interview) -> Optional[InterviewSetup]:
        if not interview.campaign_id:
            return None
        campaign_interview = await self._repos.campaign_interviews.get_by_interview_id(interview.interview_id)
        if campaign_interview is None or not campaign_interview.setup_id:
            return None
        return await self._repos.setups.get_by_id(campaign_interview.setup_id)

    # ------------------------------------------------------------------
    # Flow lifecycle
    # ------------------------------------------------------------------

    async def initialize_interview_flow(
        self,
        interview_id: str,
        candidate_email: str,
        interview_type: Optional[InterviewType | str] = None,
        flow_type: Optional[FlowType | str] = None,
    ) -> InterviewFlow:
        """Start, or resume, a candidate's flow through an interview.

        Args:
            interview_id: Public interview id
            candidate_email: Verified email of the candidate
            interview_type: Type the client expects; must match the stored type when given
            flow_type: Ignored when the interview belongs to a campaign

        Returns:
            The new flow, or the stored one when the candidate already started

        Raises:
            NotFoundError: Unknown interview
            AuthorizationError: Interview assigned to another email
            LinkExpiredError: Interview link has expired
            ConflictError: Interview already completed or cancelled
            ValidationError: Interview type mismatch or unusable question set
        """
        candidate_email = candidate_email.strip().lower()
        interview = await self._load_interview(interview_id)
        await self._check_access(interview, candidate_email)

        stored_type = InterviewType(interview.interview_type)
        if interview_type is not None and InterviewType(interview_type) != stored_type:
            raise ValidationError(
                f"Interview type mismatch: expected {stored_type.value}, got {InterviewType(interview_type).value}"
            )

        existing = await self._store.load(interview_id, candidate_email)
        if existing is not None:
            await self._store.touch(interview_id, candidate_email, self._store.ttl_for(existing))
            logger.debug(f"Resuming flow for interview {interview_id} at question {existing.current_index + 1}")
            log_flow_initialized(interview_id, stored_type.value, existing.flow_type.value, resumed=True)
            return existing

        resolved_flow_type = FlowType.campaign if interview.campaign_id else FlowType(flow_type or FlowType.direct)
        setup = await self._campaign_setup(interview)
        flow = InterviewFlow(
            interview_id=interview_id,
            candidate_email=candidate_email,
            interview_type=stored_type,
            flow_type=resolved_flow_type,
            questions=parse_questions(interview.interview_questions, stored_type),
            time_limit_minutes=interview.time_limit_minutes or (setup.time_limit if setup else None),
            passing_score=setup.passing_score if setup else self._default_passing_score,
            programming_language=interview.programming_language,
        )
        await self._store.save(flow)

        if interview.interview_status == InterviewStatus.scheduled.value:
            interview.interview_status = InterviewStatus.in_progress.value
            await self._repos.interviews.update(interview)
            campaign_interview = await self._repos.campaign_interviews.get_by_interview_id(interview_id)
            if campaign_interview is not None and campaign_interview.status == "scheduled":
                campaign_interview.status = "in_progress"
                await self._repos.campaign_interviews.update(campaign_interview)

        logger.info(
            f"Interview flow initialized: interview={interview_id} type={stored_type.value} "
            f"flow_type={resolved_flow_type.value} questions={flow.total_questions}"
        )
        log_flow_initialized(interview_id, stored_type.value, resolved_flow_type.value, resumed=False)
        return flow

    async def get_flow(self, interview_id: str, candidate_email: str) -> InterviewFlow:
        """Load the stored in-progress flow and renew its expiry.

        Raises:
            FlowStateError: If no flow exists (never started, expired or already completed)
        """
        flow = await self._store.load(interview_id, candidate_email)
        if flow is None:
            raise FlowStateError("No active interview flow. Initialize the interview first.")
        await self._store.touch(interview_id, candidate_email, self._store.ttl_for(flow))
        return flow

    def get_current_question(self, flow: InterviewFlow) -> Optional[Dict[str, Any]]:
        """Candidate view of the current question, or None once every question is answered."""
        if flow.is_completed or flow.current_index >= flow.total_questions:
            return None
        return candidate_view(flow.questions[flow.current_index])

    def submit_answer(
        self,
        flow: InterviewFlow,
        question_id: str,
        answer: Any,
        time_spent: float,
        language: Optional[str] = None,
    ) -> InterviewFlow:
        """Score the answer to the current question and advance.

        Returns:
            A new flow; ``flow`` itself is left unchanged

        Raises:
            FlowStateError: If the flow is completed or ``question_id`` is not the current question
        """
        if flow.is_completed or flow.current_index >= flow.total_questions:
            raise FlowStateError("Interview flow is already completed")
        question = flow.questions[flow.current_index]
        if question_id != question.id:
            raise FlowStateError(
                f"Expected an answer to question {question.id}, got {question_id}",
                details={"expected_question_id": question.id},
            )

        time_spent = max(0.0, float(time_spent or 0))
        if language and isinstance(answer, str):
            answer = {"code": answer, "language": language}
        record = AnswerRecord(
            question_id=question.id,
            question_type=question.type,
            answer=answer,
            time_spent=time_spent,
            score=score_answer(question, answer, time_spent, flow.programming_language),
        )

        next_index = flow.current_index + 1
        update: Dict[str, Any] = {"answers": [*flow.answers, record], "current_index": next_index}
        if next_index >= flow.total_questions:
            update.update(status=FlowStatus.completed, completed_at=utc_now())
        return flow.model_copy(update=update)

    async def answer_current_question(
        self,
        interview_id: str,
        candidate_email: str,
        question_id: str,
        answer: Any,
        time_spent: float,
        language: Optional[str] = None,
    ) -> InterviewFlow:
        """Load the stored flow, submit an answer and store the result."""
        flow = await self.get_flow(interview_id, candidate_email)
        updated = self.submit_answer(flow, question_id, answer, time_spent, language)
        await self._store.save(updated)
        return updated

    def get_progress(self, flow: InterviewFlow) -> FlowProgress:
        total = flow.total_questions
        answered = len(flow.answers)
        return FlowProgress(
            current_question=min(flow.current_index + 1, total),
            total_questions=total,
            answered=answered,
            remaining=max(0, total - answered),
            percentage=round(answered / total * 100, 2) if total else 0.0,
            time_spent_seconds=sum(a.time_spent for a in flow.answers),
            status=flow.status,
        )

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _question_results(self, flow: InterviewFlow) -> List[QuestionResult]:
        answers = {a.question_id: a for a in flow.answers}
        results: List[QuestionResult] = []
        for question in flow.questions:
            record = answers.get(question.id)
            score = record.score if record else unanswered_score(question)
            results.append(
                QuestionResult(
                    question_id=question.id,
                    question_type=question.type,
                    question=question.question,
                    answered=record is not None and score.feedback != NO_ANSWER_FEEDBACK,
                    answer=record.answer if record else None,
                    time_spent=record.time_spent if record else 0,
                    score=score.score,
                    max_score=score.max_score,
                    is_correct=score.is_correct,
                    feedback=score.feedback,
                )
            )
        return results

    @staticmethod
    def _totals(results: List[QuestionResult]) -> Tuple[float, float, float]:
        total = round(sum(r.score for r in results), 2)
        maximum = round(sum(r.max_score for r in results), 2)
        percentage = round(total / maximum * 100, 2) if maximum else 0.0
        return total, maximum, percentage

    async def complete_interview(self, flow: InterviewFlow) -> InterviewResult:
        """Score the whole interview, analyse it and persist the result.

        Unanswered questions count as zero. The stored flow is removed.

        Raises:
            ConflictError: If a result was already stored for this candidate and interview
        """
        interview = await self._load_interview(flow.interview_id)
        previous = await self._repos.history.get_latest_for_interview(flow.interview_id, flow.candidate_email)
        if previous is not None or interview.interview_status == InterviewStatus.completed.value:
            raise ConflictError("Interview has already been completed")

        results = self._question_results(flow)
        total, maximum, percentage = self._totals(results)
        passed = percentage >= flow.passing_score
        analysis = await self._analyzer.analyze(flow, results, percentage)

        completed_at = flow.completed_at or utc_now()
        duration_seconds = max(0, int((completed_at - flow.started_at).total_seconds()))
        result = InterviewResult(
            interview_id=flow.interview_id,
            candidate_email=flow.candidate_email,
            interview_type=flow.interview_type,
            flow_type=flow.flow_type,
            total_score=total,
            max_score=maximum,
            percentage=percentage,
            passed=passed,
            passing_score=flow.passing_score,
            answered_questions=sum(1 for r in results if r.answered),
            total_questions=len(results),
            duration_seconds=duration_seconds,
            completed_at=completed_at,
            questions=results,
            analysis=analysis,
        )

        campaign_interview = await self._repos.campaign_interviews.get_by_interview_id(flow.interview_id)
        setup = await self._campaign_setup(interview)
        await self._repos.history.create(
            CandidateInterviewHistory(
                candidate_email=flow.candidate_email,
                interview_id=flow.interview_id,
                interview_type=flow.interview_type.value,
                campaign_interview_id=campaign_interview.id if campaign_interview else None,
                round_number=setup.round_number if setup else 1,
                round_name=setup.round_name if setup else None,
                status="completed",
                started_at=flow.started_at,
                completed_at=completed_at,
                duration=math.ceil(duration_seconds / 60),
                score=int(round(percentage)),
                max_score=100,
                passed=passed,
                feedback=result.model_dump_json(),
                programming_language=flow.programming_language,
            )
        )

        interview.interview_status = InterviewStatus.completed.value
        await self._repos.interviews.update(interview)
        if campaign_interview is not None:
            campaign_interview.status = "completed"
            campaign_interview.score = int(round(percentage))
            campaign_interview.completed_at = completed_at
            campaign_interview.feedback = analysis.summary
            await self._repos.campaign_interviews.update(campaign_interview)

        await self._store.delete(flow.interview_id, flow.candidate_email)
        logger.info(
            f"Interview completed: interview={flow.interview_id} percentage={percentage} passed={passed}"
        )
        log_interview_completion(flow.interview_id, percentage, passed, duration_seconds)
        return result

    async def get_analysis_results(
        self, interview_id: str, candidate_email: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Return the stored result document of the latest completion, or None."""
        record = await self._repos.history.get_latest_for_interview(interview_id, candidate_email)
        if record is None:
            return None
        if record.feedback:
            try:
                return json.loads(record.feedback)
            except json.JSONDecodeError:
                logger.warning(f"Stored result for interview {interview_id} is not valid JSON")
        return {
            "interview_id": record.interview_id,
            "candidate_email": record.candidate_email,
            "interview_type": record.interview_type,
            "percentage": record.score,
            "passed": record.passed,
        }

    async def get_completion_summary(self, interview_id: str) -> InterviewCompletionSummary:
        """Result card of an interview; ``not_submitted`` with zeros when no result exists.

        Raises:
            NotFoundError: Unknown interview
        """
        interview = await self._load_interview(interview_id)
        company = await self._repos.companies.get_by_id(interview.company_id)
        title = f"{_TYPE_TITLES.get(interview.interview_type, interview.interview_type.title())} Interview"
        record = await self._repos.history.get_latest_for_interview(interview_id)

        if record is None:
            return InterviewCompletionSummary(
                interview_id=interview.interview_id,
                title=title,
                job_position=interview.job_position,
                company_name=company.name if company else None,
                interview_type=interview.interview_type,
                score=0,
                max_score=0,
                passed=False,
                total_questions=0,
                answered_questions=0,
                duration_seconds=0,
                candidate_email=interview.candidate_email,
                completed_at=None,
                status="not_submitted",
            )

        document = await self.get_analysis_results(interview_id) or {}
        return InterviewCompletionSummary(
            interview_id=interview.interview_id,
            title=title,
            job_position=interview.job_position,
            company_name=company.name if company else None,
            interview_type=record.interview_type,
            score=record.score or 0,
            max_score=record.max_score or 100,
            passed=bool(record.passed),
            total_questions=int(document.get("total_questions", 0)),
            answered_questions=int(document.get("answered_questions", 0)),
            duration_seconds=int(document.get("duration_seconds", (record.duration or 0) * 60)),
            candidate_email=record.candidate_email,
            completed_at=record.completed_at,
            status=record.status,
        )
