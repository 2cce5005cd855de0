"""
Candidate Access Endpoints.

OTP-gated access to interviews:

1. ``verify-email`` / ``resend-otp`` issue a code to an email that has an interview
2. ``verify-otp`` exchanges the code for an interview session cookie
3. ``update-session``, ``session`` and ``logout`` maintain that session
"""

from fastapi import APIRouter, Request, Response

from gradii.core.errors import AuthorizationError, NotFoundError, RateLimitError
from gradii.core.logging_config import get_logger
from gradii.core.models.domain import InterviewSession, OtpPurpose
from gradii.core.models.io.candidate_access import (
    SessionResponse,
    SessionSummary,
    UpdateSessionRequest,
    VerifyEmailRequest,
    VerifyEmailResponse,
    VerifyOTPRequest,
)
from gradii.server.core.config import settings
from gradii.server.services.deps import (
    EmailServiceDep,
    InterviewSessionDep,
    OTPServiceDep,
    RateLimiterDep,
    ReposDep,
    SessionManagerDep,
    get_client_ip,
)

logger = get_logger(__name__)

router = APIRouter()

_PURPOSE = OtpPurpose.candidate_access.value


def _summary(session: InterviewSession) -> SessionSummary:
    return SessionSummary(
        email=session.email,
        interview_id=session.interview_id,
        interview_type=session.interview_type,
        verified=session.verified,
        created_at=session.created_at,
        last_activity=session.last_activity,
        expires_at=session.expires_at,
        face_verified=session.face_verification_data is not None,
        location_recorded=session.candidate_location is not None,
    )


async def _issue_candidate_otp(
    email: str,
    repos: ReposDep,
    otp_service: OTPServiceDep,
    email_service: EmailServiceDep,
    limiter: RateLimiterDep,
) -> VerifyEmailResponse:
    interviews = await repos.interviews.find_by_candidate_email(email)
    candidate = None if interviews else await repos.candidates.get_by_email(email)
    if not interviews and candidate is None:
        raise NotFoundError("Interview for this email")

    otp_config = settings.otp
    limit = await limiter.check(f"otp:{email}", otp_config.rate_limit_max, otp_config.rate_limit_window_seconds)
    if not limit.allowed:
        raise RateLimitError(
            "Too many OTP requests. Please try again later.",
            details={"retry_after": limit.retry_after_seconds},
        )

    code = await otp_service.issue(email, _PURPOSE)
    interview = interviews[0] if interviews else None
    candidate_name = interview.candidate_name if interview else candidate.name
    sent = await email_service.send_otp_email(
        email,
        code.otp,
        _PURPOSE,
        candidate_name=candidate_name,
        interview_link=interview.interview_link if interview else None,
    )
    if not sent:
        logger.warning(f"OTP for {email} was stored but the email could not be sent")

    return VerifyEmailResponse(
        message="OTP sent to your email",
        email=email,
        expires_in_seconds=otp_config.ttl_seconds,
        email_sent=sent,
    )


@router.post(
    "/verify-email",
    response_model=VerifyEmailResponse,
    summary="Request Interview OTP",
    description="Send a one-time passcode to a candidate email that has an interview.",
    responses={404: {"description": "No interview for this email"}, 429: {"description": "Too many requests"}},
)
async def verify_email(
    body: VerifyEmailRequest,
    repos: ReposDep,
    otp_service: OTPServiceDep,
    email_service: EmailServiceDep,
    limiter: RateLimiterDep,
) -> VerifyEmailResponse:
    return await _issue_candidate_otp(body.email, repos, otp_service, email_service, limiter)


@router.post(
    "/resend-otp",
    response_model=VerifyEmailResponse,
    summary="Resend Interview OTP",
    description="Issue a fresh passcode, replacing the previous one. Shares the rate limit of verify-email.",
    responses={404: {"description": "No interview for this email"}, 429: {"description": "Too many requests"}},
)
async def resend_otp(
    body: VerifyEmailRequest,
    repos: ReposDep,
    otp_service: OTPServiceDep,
    email_service: EmailServiceDep,
    limiter: RateLimiterDep,
) -> VerifyEmailResponse:
    return await _issue_candidate_otp(body.email, repos, otp_service, email_service, limiter)


@router.post(
    "/verify-otp",
    response_model=SessionResponse,
    summary="Verify Interview OTP",
    description="Exchange a valid passcode for an interview session cookie.",
    responses={400: {"description": "Invalid, expired or exhausted OTP"}},
)
async def verify_otp(
    body: VerifyOTPRequest,
    request: Request,
    response: Response,
    otp_service: OTPServiceDep,
    manager: SessionManagerDep,
) -> SessionResponse:
    """
    Verify an OTP and start an interview session.

    The session id is returned only as an httpOnly cookie.
    """
    await otp_service.verify(body.email, body.otp, _PURPOSE)
    session = await manager.create_session(
        body.email,
        interview_id=body.interview_id,
        interview_type=body.interview_type,
        candidate_ip=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )

    config = settings.interview_session
    response.set_cookie(
        key=config.cookie_name,
        value=session.id,
        max_age=config.ttl_seconds,
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
        path="/",
    )
    return SessionResponse(message="OTP verified successfully", session=_summary(session))


@router.post(
    "/update-session",
    response_model=SessionResponse,
    summary="Update Interview Session",
    description="Record face verification and location data on the current session.",
)
async def update_session(
    body: UpdateSessionRequest,
    session: InterviewSessionDep,
    manager: SessionManagerDep,
) -> SessionResponse:
    updates = body.model_dump(exclude_unset=True)
    requested = updates.get("interview_id")
    if requested and session.interview_id and requested != session.interview_id:
        raise AuthorizationError("This session belongs to a different interview")
    if updates:
        await manager.update_session(session.id, updates)
    refreshed = await manager.get_session(session.id) or session
    return SessionResponse(message="Session updated", session=_summary(refreshed))


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Current Interview Session",
    description="Return the current candidate session.",
)
async def current_session(session: InterviewSessionDep) -> SessionResponse:
    return SessionResponse(session=_summary(session))


@router.post(
    "/logout",
    response_model=SessionResponse,
    summary="End Interview Session",
    description="Delete the current session and clear its cookie.",
)
async def logout(request: Request, response: Response, manager: SessionManagerDep) -> SessionResponse:
    config = settings.interview_session
    session_id = request.cookies.get(config.cookie_name)
    if session_id:
        await manager.delete_session(session_id)
    response.delete_cookie(config.cookie_name, path="/")
    return SessionResponse(message="Logged out")
