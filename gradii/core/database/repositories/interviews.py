"""
Interview repository.

Provides data access operations for interviews, including lookups by the
public ``interview_id`` slug and by candidate email.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.interviews import Interview
from .base import AsyncBaseRepository, AsyncQueryBuilder


class InterviewRepository(AsyncBaseRepository[Interview]):
    """Repository for interview data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Interview)

    async def create(self, interview: Interview) -> Interview:
        """Create a new interview.

        Args:
            interview: Interview SQLModel instance

        Returns:
            Persisted Interview with generated fields
        """
        return await self._save(interview)

    async def get_by_id(self, interview_pk: str | int) -> Optional[Interview]:
        return await self.session.get(Interview, int(interview_pk))

    async def get_by_interview_id(self, interview_id: str) -> Optional[Interview]:
        """Get an interview by its public identifier.

        Args:
            interview_id: The ``interview_id`` slug used in candidate links

        Returns:
            Interview instance or None
        """
        stmt = select(Interview).where(Interview.interview_id == interview_id)
        result = await self.session.exec(stmt)
        return result.first()

    async def update(self, interview: Interview) -> Interview:
        interview.updated_at = utc_now()
        return await self._save(interview)

    async def update_status(self, interview_id: str, status: str) -> Optional[Interview]:
        """Set ``interview_status`` on the interview with the given public id.

        Returns:
            Updated Interview or None if not found
        """
        interview = await self.get_by_interview_id(interview_id)
        if interview is None:
            return None
        interview.interview_status = status
        return await self.update(interview)

    async def delete(self, interview_pk: str | int) -> bool:
        interview = await self.get_by_id(interview_pk)
        if interview is None:
            return False
        await self.session.delete(interview)
        await self.session.commit()
        return True

    async def delete_by_interview_id(self, interview_id: str) -> bool:
        interview = await self.get_by_interview_id(interview_id)
        if interview is None:
            return False
        await self.session.delete(interview)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Interview]:
        """List interviews with optional pagination and filtering.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: Field filters (company_id, campaign_id, interview_type, interview_status)

        Returns:
            List of Interview instances, newest first
        """
        stmt = select(Interview).order_by(Interview.created_at.desc())
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, Interview, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def find_by_candidate_email(self, email: str) -> List[Interview]:
        """Get every interview addressed to a candidate email (case-insensitive)."""
        stmt = (
            select(Interview)
            .where(func.lower(Interview.candidate_email) == email.strip().lower())
            .order_by(Interview.created_at.desc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())
