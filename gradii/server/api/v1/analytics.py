"""
Interview Analytics Endpoints.

Aggregates interview outcomes per interview type from stored results.
"""

from collections import defaultdict
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from gradii.core.database.entities import CandidateInterviewHistory, Interview
from gradii.core.models.domain import InterviewStatus
from gradii.core.models.io.admin import InterviewAnalyticsResponse, InterviewTypeStats
from gradii.server.services.deps import ReposDep, require_admin_key

router = APIRouter(dependencies=[Depends(require_admin_key)])


def _rate(part: int, whole: int) -> Optional[float]:
    return round(part / whole * 100, 2) if whole else None


def _average(values: List[int]) -> Optional[float]:
    return round(sum(values) / len(values), 2) if values else None


def summarize(interviews: List[Interview], results: List[CandidateInterviewHistory]) -> InterviewAnalyticsResponse:
    """Build completion, pass rate and average score figures."""
    latest: Dict[str, CandidateInterviewHistory] = {}
    for record in results:
        current = latest.get(record.interview_id)
        if current is None or (record.completed_at or record.created_at) > (current.completed_at or current.created_at):
            latest[record.interview_id] = record

    by_type: Dict[str, List[Interview]] = defaultdict(list)
    for interview in interviews:
        by_type[interview.interview_type].append(interview)

    def _scored(group: List[Interview]) -> List[CandidateInterviewHistory]:
        return [latest[i.interview_id] for i in group if i.interview_id in latest]

    stats = []
    for interview_type in sorted(by_type):
        group = by_type[interview_type]
        scored = _scored(group)
        completed = sum(1 for i in group if i.interview_status == InterviewStatus.completed.value)
        stats.append(
            InterviewTypeStats(
                interview_type=interview_type,
                total=len(group),
                completed=completed,
                average_score=_average([r.score for r in scored if r.score is not None]),
                pass_rate=_rate(sum(1 for r in scored if r.passed), len(scored)),
            )
        )

    scored = _scored(interviews)
    completed = sum(1 for i in interviews if i.interview_status == InterviewStatus.completed.value)
    return InterviewAnalyticsResponse(
        total_interviews=len(interviews),
        completed_interviews=completed,
        completion_rate=_rate(completed, len(interviews)) or 0.0,
        pass_rate=_rate(sum(1 for r in scored if r.passed), len(scored)),
        average_score=_average([r.score for r in scored if r.score is not None]),
        by_type=stats,
    )


@router.get(
    "/interviews",
    response_model=InterviewAnalyticsResponse,
    summary="Interview Analytics",
    description="Completion rate, pass rate and average score overall and per interview type.",
)
async def interview_analytics(
    repos: ReposDep,
    company_id: Optional[str] = Query(default=None),
) -> InterviewAnalyticsResponse:
    filters = {"company_id": company_id} if company_id else None
    interviews = await repos.interviews.list(filters=filters)
    results = await repos.history.list_for_interviews([i.interview_id for i in interviews])
    return summarize(interviews, results)
