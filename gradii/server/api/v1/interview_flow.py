"""
Interview Flow Endpoints.

A single action endpoint drives the candidate through an interview:

- ``initialize``: start or resume the flow and bind the session to the interview
- ``submit_answer``: score the current question and advance
- ``get_progress``: report where the candidate is
- ``complete``: score everything, analyse and persist the result

The candidate is always the email of the OTP-verified session.
"""

from typing import Optional

from fastapi import APIRouter, Query

from gradii.core.errors import AuthorizationError, ConflictError, ValidationError
from gradii.core.logging_config import get_logger
from gradii.core.models.domain import InterviewFlow, InterviewSession
from gradii.core.models.io.interview_flow import FlowRequest, FlowResponse, FlowResultsResponse, FlowSummary
from gradii.interview.flow import UnifiedInterviewService
from gradii.server.services.deps import InterviewServiceDep, InterviewSessionDep, SessionManagerDep

logger = get_logger(__name__)

router = APIRouter()

FLOW_ACTIONS = ("initialize", "submit_answer", "get_progress", "complete")


def _check_binding(session: InterviewSession, interview_id: str) -> None:
    if session.interview_id and session.interview_id != interview_id:
        raise AuthorizationError("This session belongs to a different interview")


def _flow_response(service: UnifiedInterviewService, flow: InterviewFlow) -> FlowResponse:
    return FlowResponse(
        flow=FlowSummary.from_flow(flow),
        current_question=service.get_current_question(flow),
        progress=service.get_progress(flow),
        is_completed=flow.is_completed,
    )


@router.post(
    "",
    response_model=FlowResponse,
    response_model_exclude_none=True,
    summary="Interview Flow Action",
    description="Initialize, answer, inspect or complete the candidate's interview flow.",
    responses={
        400: {"description": "Unknown action, missing fields or invalid flow state"},
        401: {"description": "Missing or expired interview session"},
        403: {"description": "Session bound to another interview"},
        409: {"description": "Interview already completed"},
        410: {"description": "Interview link expired"},
    },
)
async def flow_action(
    body: FlowRequest,
    session: InterviewSessionDep,
    service: InterviewServiceDep,
    manager: SessionManagerDep,
) -> FlowResponse:
    action = body.action.strip().lower()
    if action not in FLOW_ACTIONS:
        raise ValidationError(f"Unknown action: {body.action}", details={"allowed": list(FLOW_ACTIONS)})
    _check_binding(session, body.interview_id)
    email = session.email

    if action == "initialize":
        flow = await service.initialize_interview_flow(body.interview_id, email, body.interview_type)
        if session.interview_id is None:
            await manager.update_session(
                session.id,
                {"interview_id": body.interview_id, "interview_type": flow.interview_type.value},
            )
        response = _flow_response(service, flow)
        response.is_completed = None
        return response

    if action == "submit_answer":
        if not body.question_id:
            raise ValidationError("question_id is required to submit an answer")
        flow = await service.answer_current_question(
            body.interview_id, email, body.question_id, body.answer, body.time_spent, body.language
        )
        logger.debug(f"Answer stored for interview {body.interview_id}: {len(flow.answers)}/{flow.total_questions}")
        return _flow_response(service, flow)

    if action == "get_progress":
        flow = await service.get_flow(body.interview_id, email)
        return FlowResponse(
            progress=service.get_progress(flow),
            current_question=service.get_current_question(flow),
            is_completed=flow.is_completed,
        )

    if await service.get_analysis_results(body.interview_id, email) is not None:
        raise ConflictError("Interview has already been completed")
    flow = await service.get_flow(body.interview_id, email)
    result = await service.complete_interview(flow)
    return FlowResponse(analysis_result=result, is_completed=True)


@router.get(
    "",
    response_model=FlowResultsResponse,
    summary="Interview Results",
    description="Return the stored analysis of the candidate's completed interview, if any.",
)
async def flow_results(
    session: InterviewSessionDep,
    service: InterviewServiceDep,
    interview_id: Optional[str] = Query(default=None, description="Public interview id"),
) -> FlowResultsResponse:
    interview_id = interview_id or session.interview_id
    if not interview_id:
        raise ValidationError("interview_id is required")
    _check_binding(session, interview_id)

    results = await service.get_analysis_results(interview_id, session.email)
    return FlowResultsResponse(has_results=results is not None, analysis_result=results)
