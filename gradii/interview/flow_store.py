"""
Server-side storage of in-progress interview flows.

Flows are kept as JSON in Redis under ``interview_flow:{interview_id}:{email}``
and expire together with the candidate's session. Every read through the
service renews the expiry, and a flow never expires before its time limit.
"""

from __future__ import annotations

from typing import Optional

import redis.asyncio as aioredis
from pydantic import ValidationError as PydanticValidationError

from gradii.core.logging_config import get_logger
from gradii.core.models.domain import InterviewFlow

logger = get_logger(__name__)

FLOW_PREFIX = "interview_flow:"


class FlowStore:
    def __init__(self, redis: aioredis.Redis, ttl_seconds: int) -> None:
        self._redis = redis
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(interview_id: str, email: str) -> str:
        return f"{FLOW_PREFIX}{interview_id}:{email.strip().lower()}"

    async def load(self, interview_id: str, email: str) -> Optional[InterviewFlow]:
        raw = await self._redis.get(self.key(interview_id, email))
        if raw is None:
            return None
        try:
            return InterviewFlow.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning(f"Discarding unreadable flow for interview {interview_id}")
            await self.delete(interview_id, email)
            return None

    def ttl_for(self, flow: InterviewFlow) -> int:
        """Expiry of a flow: the session TTL, or the interview time limit when that is longer."""
        if flow.time_limit_minutes:
            return max(self.ttl_seconds, int(flow.time_limit_minutes) * 60)
        return self.ttl_seconds

    async def save(self, flow: InterviewFlow) -> None:
        await self._redis.set(
            self.key(flow.interview_id, flow.candidate_email),
            flow.model_dump_json(),
            ex=self.ttl_for(flow),
        )

    async def touch(self, interview_id: str, email: str, ttl_seconds: Optional[int] = None) -> bool:
        """Renew the expiry of a stored flow. Returns False when there is none."""
        return bool(await self._redis.expire(self.key(interview_id, email), ttl_seconds or self.ttl_seconds))

    async def delete(self, interview_id: str, email: str) -> bool:
        return bool(await self._redis.delete(self.key(interview_id, email)))
