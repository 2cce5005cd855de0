"""
Job Campaign Endpoints.

A campaign collects candidates for one job and defines its interview rounds.
Scheduling a round creates the candidate's ``Interview`` together with the
``CampaignInterview`` that tracks its outcome.
"""

from typing import List

from fastapi import APIRouter, Depends

from gradii.core.database.entities import Candidate, CampaignInterview, InterviewSetup, JobCampaign
from gradii.core.errors import NotFoundError, ValidationError
from gradii.core.logging_config import get_logger
from gradii.core.models.domain import InterviewType
from gradii.core.models.io.admin import (
    CampaignCreate,
    CampaignInterviewCreate,
    CampaignInterviewRead,
    CampaignRead,
    CandidateCreate,
    CandidateRead,
    InterviewSetupCreate,
    InterviewSetupRead,
    ScheduledInterviewResponse,
)
from gradii.server.services.deps import QuestionGeneratorDep, ReposDep, require_admin_key
from gradii.server.services.interviews import build_interview, resolve_questions, to_interview_read

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_key)])


async def _load_campaign(repos: ReposDep, campaign_id: str) -> JobCampaign:
    campaign = await repos.campaigns.get_by_id(campaign_id)
    if campaign is None:
        raise NotFoundError("Campaign")
    return campaign


@router.post(
    "",
    response_model=CampaignRead,
    status_code=201,
    summary="Create Campaign",
    responses={404: {"description": "Company not found"}},
)
async def create_campaign(body: CampaignCreate, repos: ReposDep) -> CampaignRead:
    if await repos.companies.get_by_id(body.company_id) is None:
        raise NotFoundError("Company")
    campaign = await repos.campaigns.create(
        JobCampaign(
            company_id=body.company_id,
            campaign_name=body.campaign_name,
            job_title=body.job_title,
            job_description=body.job_description,
        )
    )
    logger.info(f"Campaign created: {campaign.id} ({campaign.campaign_name})")
    return CampaignRead.model_validate(campaign)


@router.post(
    "/{campaign_id}/candidates",
    response_model=CandidateRead,
    status_code=201,
    summary="Add Candidate",
    responses={404: {"description": "Campaign not found"}},
)
async def add_candidate(campaign_id: str, body: CandidateCreate, repos: ReposDep) -> CandidateRead:
    await _load_campaign(repos, campaign_id)
    candidate = await repos.candidates.create(
        Candidate(
            campaign_id=campaign_id,
            name=body.name,
            email=body.email.strip().lower(),
            source=body.source,
        )
    )
    return CandidateRead.model_validate(candidate)


@router.post(
    "/{campaign_id}/setups",
    response_model=InterviewSetupRead,
    status_code=201,
    summary="Add Interview Round",
    responses={404: {"description": "Campaign not found"}},
)
async def add_setup(campaign_id: str, body: InterviewSetupCreate, repos: ReposDep) -> InterviewSetupRead:
    await _load_campaign(repos, campaign_id)
    setup = await repos.setups.create(
        InterviewSetup(
            campaign_id=campaign_id,
            round_number=body.round_number,
            round_name=body.round_name,
            interview_type=body.interview_type.value,
            time_limit=body.time_limit,
            number_of_questions=body.number_of_questions,
            difficulty_level=body.difficulty_level,
            passing_score=body.passing_score,
            instructions=body.instructions,
        )
    )
    return InterviewSetupRead.model_validate(setup)


@router.post(
    "/{campaign_id}/interviews",
    response_model=ScheduledInterviewResponse,
    status_code=201,
    summary="Schedule Campaign Interview",
    description="Schedule an interview round for a campaign candidate.",
    responses={
        400: {"description": "Candidate or round belongs to another campaign, or invalid questions"},
        404: {"description": "Campaign, candidate or round not found"},
    },
)
async def schedule_interview(
    campaign_id: str, body: CampaignInterviewCreate, repos: ReposDep, generator: QuestionGeneratorDep
) -> ScheduledInterviewResponse:
    campaign = await _load_campaign(repos, campaign_id)
    candidate = await repos.candidates.get_by_id(body.candidate_id)
    if candidate is None:
        raise NotFoundError("Candidate")
    setup = await repos.setups.get_by_id(body.setup_id)
    if setup is None:
        raise NotFoundError("Interview setup")
    if candidate.campaign_id != campaign_id or setup.campaign_id != campaign_id:
        raise ValidationError("Candidate and interview setup must belong to this campaign")

    questions = await resolve_questions(
        body.questions,
        generator,
        interview_type=InterviewType(setup.interview_type),
        count=setup.number_of_questions,
        difficulty=setup.difficulty_level,
        job_position=campaign.job_title,
        job_description=campaign.job_description,
        programming_language=body.programming_language,
    )
    interview = build_interview(
        company_id=campaign.company_id,
        campaign_id=campaign_id,
        job_position=campaign.job_title,
        job_description=campaign.job_description,
        interview_type=InterviewType(setup.interview_type),
        questions=questions,
        candidate_email=candidate.email,
        candidate_name=candidate.name,
        programming_language=body.programming_language,
        time_limit_minutes=setup.time_limit,
        link_valid_hours=body.link_valid_hours,
    )
    interview = await repos.interviews.create(interview)
    campaign_interview = await repos.campaign_interviews.create(
        CampaignInterview(
            campaign_id=campaign_id,
            candidate_id=candidate.id,
            setup_id=setup.id,
            interview_id=interview.interview_id,
            interview_type=setup.interview_type,
            scheduled_at=body.scheduled_at,
        )
    )
    if candidate.status == "applied":
        candidate.status = "interview"
        await repos.candidates.update(candidate)

    logger.info(
        f"Scheduled round {setup.round_number} ({setup.round_name}) of campaign {campaign_id} "
        f"for {candidate.email}: interview {interview.interview_id}"
    )
    return ScheduledInterviewResponse(
        campaign_interview=CampaignInterviewRead.model_validate(campaign_interview),
        interview=to_interview_read(interview),
    )


@router.get(
    "/{campaign_id}/interviews",
    response_model=List[CampaignInterviewRead],
    summary="List Campaign Interviews",
    responses={404: {"description": "Campaign not found"}},
)
async def list_campaign_interviews(campaign_id: str, repos: ReposDep) -> List[CampaignInterviewRead]:
    await _load_campaign(repos, campaign_id)
    interviews = await repos.campaign_interviews.list(filters={"campaign_id": campaign_id})
    return [CampaignInterviewRead.model_validate(i) for i in interviews]
