"""
Job campaign repositories.

This module provides data access operations for campaigns and the records
hanging off them: candidates, interview rounds (setups) and scheduled
campaign interviews.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..base import utc_now
from ..entities.campaigns import CampaignInterview, Candidate, InterviewSetup, JobCampaign
from .base import AsyncBaseRepository, AsyncQueryBuilder


class JobCampaignRepository(AsyncBaseRepository[JobCampaign]):
    """Repository for job campaign data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, JobCampaign)

    async def create(self, campaign: JobCampaign) -> JobCampaign:
        return await self._save(campaign)

    async def get_by_id(self, campaign_id: str | int) -> Optional[JobCampaign]:
        return await self.session.get(JobCampaign, str(campaign_id))

    async def update(self, campaign: JobCampaign) -> JobCampaign:
        campaign.updated_at = utc_now()
        return await self._save(campaign)

    async def delete(self, campaign_id: str | int) -> bool:
        campaign = await self.get_by_id(campaign_id)
        if campaign is None:
            return False
        await self.session.delete(campaign)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[JobCampaign]:
        stmt = select(JobCampaign).order_by(JobCampaign.created_at.desc())
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, JobCampaign, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())


class CandidateRepository(AsyncBaseRepository[Candidate]):
    """Repository for campaign candidate data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Candidate)

    async def create(self, candidate: Candidate) -> Candidate:
        return await self._save(candidate)

    async def get_by_id(self, candidate_id: str | int) -> Optional[Candidate]:
        return await self.session.get(Candidate, str(candidate_id))

    async def update(self, candidate: Candidate) -> Candidate:
        candidate.updated_at = utc_now()
        return await self._save(candidate)

    async def delete(self, candidate_id: str | int) -> bool:
        candidate = await self.get_by_id(candidate_id)
        if candidate is None:
            return False
        await self.session.delete(candidate)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Candidate]:
        stmt = select(Candidate).order_by(Candidate.applied_at.desc())
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, Candidate, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def get_by_email(self, email: str) -> Optional[Candidate]:
        """Get the most recent candidate record for an email (case-insensitive)."""
        stmt = (
            select(Candidate)
            .where(func.lower(Candidate.email) == email.strip().lower())
            .order_by(Candidate.applied_at.desc())
        )
        result = await self.session.exec(stmt)
        return result.first()


class InterviewSetupRepository(AsyncBaseRepository[InterviewSetup]):
    """Repository for campaign interview round definitions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, InterviewSetup)

    async def create(self, setup: InterviewSetup) -> InterviewSetup:
        return await self._save(setup)

    async def get_by_id(self, setup_id: str | int) -> Optional[InterviewSetup]:
        return await self.session.get(InterviewSetup, str(setup_id))

    async def update(self, setup: InterviewSetup) -> InterviewSetup:
        return await self._save(setup)

    async def delete(self, setup_id: str | int) -> bool:
        setup = await self.get_by_id(setup_id)
        if setup is None:
            return False
        await self.session.delete(setup)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[InterviewSetup]:
        stmt = select(InterviewSetup).order_by(InterviewSetup.round_number)
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, InterviewSetup, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())

    async def list_active_for_campaign(self, campaign_id: str) -> List[InterviewSetup]:
        return await self.list(filters={"campaign_id": campaign_id, "is_active": True})


class CampaignInterviewRepository(AsyncBaseRepository[CampaignInterview]):
    """Repository for interviews scheduled within a campaign."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CampaignInterview)

    async def create(self, campaign_interview: CampaignInterview) -> CampaignInterview:
        return await self._save(campaign_interview)

    async def get_by_id(self, campaign_interview_id: str | int) -> Optional[CampaignInterview]:
        return await self.session.get(CampaignInterview, str(campaign_interview_id))

    async def get_by_interview_id(self, interview_id: str) -> Optional[CampaignInterview]:
        """Get the campaign record for an interview's public id."""
        stmt = select(CampaignInterview).where(CampaignInterview.interview_id == interview_id)
        result = await self.session.exec(stmt)
        return result.first()

    async def update(self, campaign_interview: CampaignInterview) -> CampaignInterview:
        campaign_interview.updated_at = utc_now()
        return await self._save(campaign_interview)

    async def delete(self, campaign_interview_id: str | int) -> bool:
        campaign_interview = await self.get_by_id(campaign_interview_id)
        if campaign_interview is None:
            return False
        await self.session.delete(campaign_interview)
        await self.session.commit()
        return True

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[CampaignInterview]:
        stmt = select(CampaignInterview).order_by(CampaignInterview.created_at.desc())
        if filters:
            stmt = AsyncQueryBuilder.apply_filters(stmt, CampaignInterview, filters)
        stmt = AsyncQueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.exec(stmt)
        return list(result.all())
