"""
Interview Completion Endpoint.

Public result card for a submitted interview, shown on the completion page.
"""

from fastapi import APIRouter

from gradii.core.models.io.interview_flow import InterviewCompletionSummary
from gradii.server.services.deps import InterviewServiceDep

router = APIRouter()


@router.get(
    "/complete/{interview_id}",
    response_model=InterviewCompletionSummary,
    summary="Interview Completion Summary",
    description=(
        "Return title, score and timing of a submitted interview. "
        "Interviews without a result report status 'not_submitted'."
    ),
    responses={404: {"description": "Interview not found"}},
)
async def completion_summary(interview_id: str, service: InterviewServiceDep) -> InterviewCompletionSummary:
    return await service.get_completion_summary(interview_id)
