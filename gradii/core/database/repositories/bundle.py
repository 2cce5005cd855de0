"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, for services that touch several aggregates.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel.ext.asyncio.session import AsyncSession

from .campaigns import (
    CampaignInterviewRepository,
    CandidateRepository,
    InterviewSetupRepository,
    JobCampaignRepository,
)
from .companies import CompanyRepository
from .interview_history import InterviewHistoryRepository
from .interviews import InterviewRepository
from .otp_codes import OtpCodeRepository


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    companies: CompanyRepository
    interviews: InterviewRepository
    campaigns: JobCampaignRepository
    candidates: CandidateRepository
    setups: InterviewSetupRepository
    campaign_interviews: CampaignInterviewRepository
    otp_codes: OtpCodeRepository
    history: InterviewHistoryRepository


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        companies=CompanyRepository(session),
        interviews=InterviewRepository(session),
        campaigns=JobCampaignRepository(session),
        candidates=CandidateRepository(session),
        setups=InterviewSetupRepository(session),
        campaign_interviews=CampaignInterviewRepository(session),
        otp_codes=OtpCodeRepository(session),
        history=InterviewHistoryRepository(session),
    )
