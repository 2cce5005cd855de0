"""
API Dependencies.

Provides the database session, Redis-backed services and the guards used by
the endpoints. Tests replace ``get_session``, ``get_redis_client``,
``get_piston_client`` and ``get_question_generator`` through
``app.dependency_overrides``.
"""

from __future__ import annotations

import secrets
from typing import Annotated, Optional

import redis.asyncio as aioredis
from fastapi import Depends, Header, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from gradii.access.mailer import EmailService
from gradii.access.otp import OTPService
from gradii.access.rate_limiter import RedisRateLimiter
from gradii.access.session_manager import InterviewSessionManager
from gradii.core.database import get_session
from gradii.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from gradii.core.errors import AuthenticationError, AuthorizationError
from gradii.core.models.domain import InterviewSession
from gradii.integrations.piston import PistonClient
from gradii.integrations.redis_client import get_redis
from gradii.interview.analysis import InterviewAnalyzer
from gradii.interview.flow import UnifiedInterviewService
from gradii.interview.flow_store import FlowStore
from gradii.interview.generation import QuestionGenerator
from gradii.server.core.config import settings

_piston_client: Optional[PistonClient] = None


SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_repos(session: SessionDep) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]


def get_redis_client() -> aioredis.Redis:
    return get_redis()


RedisDep = Annotated[aioredis.Redis, Depends(get_redis_client)]


def get_session_manager(redis: RedisDep) -> InterviewSessionManager:
    return InterviewSessionManager(redis, ttl_seconds=settings.interview_session.ttl_seconds)


def get_rate_limiter(redis: RedisDep) -> RedisRateLimiter:
    return RedisRateLimiter(redis)


def get_flow_store(redis: RedisDep) -> FlowStore:
    return FlowStore(redis, ttl_seconds=settings.interview_session.ttl_seconds)


def get_email_service() -> EmailService:
    return EmailService(settings.smtp, otp_ttl_seconds=settings.otp.ttl_seconds)


def get_otp_service(repos: ReposDep) -> OTPService:
    otp = settings.otp
    return OTPService(repos.otp_codes, ttl_seconds=otp.ttl_seconds, max_attempts=otp.max_attempts)


def get_analyzer() -> InterviewAnalyzer:
    return InterviewAnalyzer(model=settings.scoring.model or None)


def get_question_generator() -> QuestionGenerator:
    return QuestionGenerator(model=settings.scoring.model or None)


SessionManagerDep = Annotated[InterviewSessionManager, Depends(get_session_manager)]
RateLimiterDep = Annotated[RedisRateLimiter, Depends(get_rate_limiter)]
EmailServiceDep = Annotated[EmailService, Depends(get_email_service)]
OTPServiceDep = Annotated[OTPService, Depends(get_otp_service)]
QuestionGeneratorDep = Annotated[QuestionGenerator, Depends(get_question_generator)]


def get_interview_service(
    repos: ReposDep,
    store: Annotated[FlowStore, Depends(get_flow_store)],
    analyzer: Annotated[InterviewAnalyzer, Depends(get_analyzer)],
) -> UnifiedInterviewService:
    return UnifiedInterviewService(
        repos, store, analyzer, default_passing_score=settings.scoring.default_passing_score
    )


InterviewServiceDep = Annotated[UnifiedInterviewService, Depends(get_interview_service)]


def get_piston_client() -> PistonClient:
    """Return the shared Piston client, creating it on first use."""
    global _piston_client
    if _piston_client is None:
        config = settings.piston
        _piston_client = PistonClient(config.api_url, timeout_seconds=config.timeout_seconds)
    return _piston_client


async def close_piston_client() -> None:
    global _piston_client
    if _piston_client is not None:
        await _piston_client.aclose()
        _piston_client = None


PistonDep = Annotated[PistonClient, Depends(get_piston_client)]


def get_client_ip(request: Request) -> str:
    """Best-effort client IP, honouring the usual proxy headers."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    for header in ("x-real-ip", "x-client-ip"):
        value = request.headers.get(header)
        if value:
            return value.strip()
    return request.client.host if request.client else "unknown"


async def require_interview_session(request: Request, manager: SessionManagerDep) -> InterviewSession:
    """Resolve the candidate session from its cookie and keep it alive.

    Raises:
        AuthenticationError: Missing, unknown, expired or unverified session
    """
    session_id = request.cookies.get(settings.interview_session.cookie_name)
    if not session_id:
        raise AuthenticationError("Interview session required")
    session = await manager.get_session(session_id)
    if session is None or not session.verified:
        raise AuthenticationError("Interview session is invalid or has expired")
    await manager.refresh_session(session_id)
    return session


InterviewSessionDep = Annotated[InterviewSession, Depends(require_interview_session)]


def require_admin_key(x_api_key: Annotated[Optional[str], Header()] = None) -> None:
    """Guard for admin endpoints: the ``X-API-Key`` header must match the configured key."""
    expected = settings.admin_api_key
    if not expected:
        raise AuthorizationError("Admin API is disabled")
    if not x_api_key or not secrets.compare_digest(x_api_key, expected):
        raise AuthenticationError("Invalid API key")
