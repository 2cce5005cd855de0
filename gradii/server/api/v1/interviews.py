"""
Interview Management Endpoints.

Create, inspect and delete direct interviews. The question set is validated
on creation, or generated when omitted, and the candidate link is generated
from ``PUBLIC_BASE_URL``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from gradii.core.errors import NotFoundError
from gradii.core.logging_config import get_logger
from gradii.core.models.io.admin import InterviewCreate, InterviewRead
from gradii.server.services.deps import QuestionGeneratorDep, ReposDep, require_admin_key
from gradii.server.services.interviews import build_interview, resolve_questions, to_interview_read

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_key)])


@router.post(
    "",
    response_model=InterviewRead,
    status_code=201,
    summary="Create Interview",
    description="Create a direct interview for one candidate.",
    responses={400: {"description": "Invalid question set"}, 404: {"description": "Company not found"}},
)
async def create_interview(
    body: InterviewCreate, repos: ReposDep, generator: QuestionGeneratorDep
) -> InterviewRead:
    if await repos.companies.get_by_id(body.company_id) is None:
        raise NotFoundError("Company")

    questions = await resolve_questions(
        body.questions,
        generator,
        interview_type=body.interview_type,
        count=body.number_of_questions,
        difficulty=body.difficulty_level,
        job_position=body.job_position,
        job_description=body.job_description,
        programming_language=body.programming_language,
    )
    interview = build_interview(
        company_id=body.company_id,
        job_position=body.job_position,
        interview_type=body.interview_type,
        questions=questions,
        candidate_email=body.candidate_email,
        candidate_name=body.candidate_name,
        job_description=body.job_description,
        job_experience=body.job_experience,
        programming_language=body.programming_language,
        time_limit_minutes=body.time_limit_minutes,
        link_valid_hours=body.link_valid_hours,
    )
    interview = await repos.interviews.create(interview)
    logger.info(f"Interview created: {interview.interview_id} for {interview.candidate_email}")
    return to_interview_read(interview)


@router.get(
    "/{interview_id}",
    response_model=InterviewRead,
    summary="Get Interview",
    responses={404: {"description": "Interview not found"}},
)
async def get_interview(interview_id: str, repos: ReposDep) -> InterviewRead:
    interview = await repos.interviews.get_by_interview_id(interview_id)
    if interview is None:
        raise NotFoundError("Interview")
    return to_interview_read(interview)


@router.get(
    "",
    response_model=List[InterviewRead],
    summary="List Interviews",
)
async def list_interviews(
    repos: ReposDep,
    company_id: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None, description="Filter by interview status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> List[InterviewRead]:
    filters = {}
    if company_id:
        filters["company_id"] = company_id
    if status:
        filters["interview_status"] = status
    interviews = await repos.interviews.list(limit=limit, offset=offset, filters=filters)
    return [to_interview_read(i) for i in interviews]


@router.delete(
    "/{interview_id}",
    status_code=204,
    summary="Delete Interview",
    responses={404: {"description": "Interview not found"}},
)
async def delete_interview(interview_id: str, repos: ReposDep) -> Response:
    if not await repos.interviews.delete_by_interview_id(interview_id):
        raise NotFoundError("Interview")
    logger.info(f"Interview deleted: {interview_id}")
    return Response(status_code=204)
