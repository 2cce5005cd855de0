"""
Database entity models.

Modules:
- companies: Tenant companies
- interviews: Interviews and their stored question sets
- campaigns: Job campaigns, candidates, interview rounds and scheduled rounds
- otp_codes: One-time passcodes for candidate access
- interview_history: Completed interview results
"""

from .campaigns import CampaignInterview, Candidate, InterviewSetup, JobCampaign
from .companies import Company
from .interview_history import CandidateInterviewHistory
from .interviews import Interview
from .otp_codes import OtpCode

__all__ = [
    "CampaignInterview",
    "Candidate",
    "CandidateInterviewHistory",
    "Company",
    "Interview",
    "InterviewSetup",
    "JobCampaign",
    "OtpCode",
]
