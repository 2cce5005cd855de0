"""
Redis-backed interview sessions.

A session is created once a candidate verifies an OTP. It is stored as JSON
under ``interview_session:{id}`` with a TTL, and its id travels in an
httpOnly cookie. Expiry is enforced twice: by the Redis TTL and by the
``expires_at`` timestamp checked on every read.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import redis.asyncio as aioredis
from pydantic import ValidationError as PydanticValidationError

from gradii.core.logging_config import get_logger
from gradii.core.models.domain import InterviewSession

logger = get_logger(__name__)

SESSION_PREFIX = "interview_session:"
DEFAULT_SESSION_TTL_SECONDS = 2 * 60 * 60


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_id() -> str:
    """Return a 64 character hex session id."""
    return secrets.token_hex(32)


class InterviewSessionManager:
    """Create, read, update and expire candidate interview sessions."""

    def __init__(self, redis: aioredis.Redis, ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS) -> None:
        self._redis = redis
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{SESSION_PREFIX}{session_id}"

    async def _store(self, session: InterviewSession, ttl_seconds: int) -> None:
        await self._redis.set(self._key(session.id), session.model_dump_json(), ex=max(1, ttl_seconds))

    @staticmethod
    def _parse(raw: str) -> InterviewSession:
        return InterviewSession.model_validate_json(raw)

    async def create_session(
        self,
        email: str,
        *,
        interview_id: Optional[str] = None,
        interview_type: Optional[str] = None,
        candidate_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> InterviewSession:
        """Create a verified session for a candidate.

        Args:
            email: Verified candidate email
            interview_id: Interview the session is bound to, if known yet
            interview_type: Interview type, if known yet
            candidate_ip: Client IP at verification time
            user_agent: Client user agent at verification time
            metadata: Free-form extra data

        Returns:
            The stored InterviewSession
        """
        now = _utc_now()
        session = InterviewSession(
            id=generate_session_id(),
            email=email.strip().lower(),
            interview_id=interview_id,
            interview_type=interview_type,
            verified=True,
            created_at=now,
            last_activity=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
            candidate_ip=candidate_ip,
            user_agent=user_agent,
            metadata=metadata or {},
        )
        await self._store(session, self.ttl_seconds)
        logger.info(f"Interview session created for {session.email} (interview={interview_id})")
        return session

    async def get_session(self, session_id: str) -> Optional[InterviewSession]:
        """Load a session; expired or unreadable sessions are removed and reported as missing."""
        if not session_id:
            return None
        raw = await self._redis.get(self._key(session_id))
        if raw is None:
            return None
        try:
            session = self._parse(raw)
        except PydanticValidationError:
            logger.warning(f"Discarding unreadable interview session {session_id[:8]}...")
            await self.delete_session(session_id)
            return None
        if session.expires_at <= _utc_now():
            await self.delete_session(session_id)
            return None
        return session

    async def update_session(self, session_id: str, updates: Dict[str, Any]) -> bool:
        """Merge ``updates`` into a session and bump ``last_activity``.

        Returns:
            False when the session does not exist (or has expired)
        """
        session = await self.get_session(session_id)
        if session is None:
            return False
        protected = {"id", "created_at", "expires_at"}
        merged = session.model_dump()
        merged.update({k: v for k, v in updates.items() if k not in protected})
        merged["last_activity"] = _utc_now()
        updated = InterviewSession.model_validate(merged)
        remaining = int((updated.expires_at - _utc_now()).total_seconds())
        await self._store(updated, remaining)
        return True

    async def delete_session(self, session_id: str) -> bool:
        return bool(await self._redis.delete(self._key(session_id)))

    async def refresh_session(self, session_id: str) -> bool:
        """Extend a session to a full TTL from now."""
        session = await self.get_session(session_id)
        if session is None:
            return False
        now = _utc_now()
        refreshed = session.model_copy(
            update={"last_activity": now, "expires_at": now + timedelta(seconds=self.ttl_seconds)}
        )
        await self._store(refreshed, self.ttl_seconds)
        return True

    async def _iter_sessions(self):
        async for key in self._redis.scan_iter(match=f"{SESSION_PREFIX}*"):
            raw = await self._redis.get(key)
            if raw is None:
                continue
            yield key, raw

    async def get_user_sessions(self, email: str) -> List[InterviewSession]:
        """Return the live sessions of one candidate."""
        email = email.strip().lower()
        now = _utc_now()
        sessions: List[InterviewSession] = []
        async for _, raw in self._iter_sessions():
            try:
                session = self._parse(raw)
            except PydanticValidationError:
                continue
            if session.email == email and session.expires_at > now:
                sessions.append(session)
        return sessions

    async def get_all_active_sessions(self) -> List[InterviewSession]:
        now = _utc_now()
        sessions: List[InterviewSession] = []
        async for _, raw in self._iter_sessions():
            try:
                session = self._parse(raw)
            except PydanticValidationError:
                continue
            if session.expires_at > now:
                sessions.append(session)
        return sessions

    async def cleanup_expired_sessions(self) -> int:
        """Delete expired and unreadable session records.

        Returns:
            Number of records deleted
        """
        now = _utc_now()
        removed = 0
        async for key, raw in self._iter_sessions():
            try:
                expired = self._parse(raw).expires_at <= now
            except PydanticValidationError:
                expired = True
            if expired:
                removed += await self._redis.delete(key)
        if removed:
            logger.info(f"Removed {removed} expired interview sessions")
        return removed
