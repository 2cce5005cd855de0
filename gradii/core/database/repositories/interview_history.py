"""
Candidate interview history repository.

Provides data access operations for completed interview results.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.interview_history import CandidateInterviewHistory
from .base import AsyncBaseRepository, AsyncQueryBuilder


class InterviewHistoryRepository(AsyncBaseRepository[CandidateInterviewHistory]):
    """Repository for interview result data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CandidateInterviewHistory)

    async def create(self, record: CandidateInterviewHistory) -> CandidateInterviewHistory:
        return await self._save(record)

    async def get_by_id(self, record_id: str | int) -> Optional[CandidateInterviewHistory]:
        return await self.session.get(CandidateInterviewHistory, str(record_id))

    async def update(self, record: CandidateInterviewHistory) -> CandidateInterviewHistory:
        record.updated_at = utc_now()
        return await self._save(record)

    async def delete(self, record_id: str | int) -> bool:
        record = await self.get_by_id(record_id)
        if record is None:
            return False
        await self.session.delete(record)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[CandidateInterviewHistory]:
        """List results, most recently completed first.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: Field filters (interview_id, candidate_email, interview_type, status)

        Returns:
            List of CandidateInterviewHistory instances
        """
        stmt = select(CandidateInterviewHistory).order_by(col(CandidateInterviewHistory.completed_at).desc())
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, CandidateInterviewHistory, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_latest_for_interview(
        self, interview_id: str, candidate_email: Optional[str] = None
    ) -> Optional[CandidateInterviewHistory]:
        """Get the most recent result stored for an interview.

        Args:
            interview_id: Public interview id
            candidate_email: Restrict to one candidate (case-insensitive) when given

        Returns:
            The latest CandidateInterviewHistory or None
        """
        stmt = select(CandidateInterviewHistory).where(CandidateInterviewHistory.interview_id == interview_id)
        if candidate_email:
            stmt = stmt.where(
                func.lower(CandidateInterviewHistory.candidate_email) == candidate_email.strip().lower()
            )
        stmt = stmt.order_by(col(CandidateInterviewHistory.completed_at).desc())
        result = await self.session.exec(stmt)
        return result.first()

    async def list_for_interviews(self, interview_ids: List[str]) -> List[CandidateInterviewHistory]:
        """Get every result belonging to the given interview ids."""
        if not interview_ids:
            return []
        stmt = select(CandidateInterviewHistory).where(col(CandidateInterviewHistory.interview_id).in_(interview_ids))
        result = await self.session.exec(stmt)
        return list(result.all())
