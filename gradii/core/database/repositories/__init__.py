"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides async, type-safe data access operations for its
corresponding SQLModel entity models.

Modules:
- base: AsyncBaseRepository interface and AsyncQueryBuilder utilities
- companies: Company repository operations
- interviews: Interview repository operations
- campaigns: Campaign, candidate, setup and campaign interview operations
- otp_codes: One-time passcode repository operations
- interview_history: Interview result repository operations
- bundle: All repositories over one session
"""

from .bundle import SqlRepoBundle, build_sql_repos_from_session
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

__all__ = [
    "CampaignInterviewRepository",
    "CandidateRepository",
    "CompanyRepository",
    "InterviewHistoryRepository",
    "InterviewRepository",
    "InterviewSetupRepository",
    "JobCampaignRepository",
    "OtpCodeRepository",
    "SqlRepoBundle",
    "build_sql_repos_from_session",
]
