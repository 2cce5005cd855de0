"""
Interview provisioning helpers shared by the admin endpoints.

Direct interviews and scheduled campaign rounds both end up as an
``Interview`` row with a validated question set and a candidate link.
"""

import json
from datetime import timedelta
from typing import Any, Dict, List, Optional
from uuid import uuid4

from gradii.core.database.base import utc_now
from gradii.core.database.entities import Interview
from gradii.core.logging_config import get_logger
from gradii.core.models.domain import InterviewType
from gradii.core.models.io.admin import InterviewRead
from gradii.interview.generation import QuestionGenerator
from gradii.interview.questions import dump_questions, parse_questions
from gradii.server.core.config import settings

logger = get_logger(__name__)


def new_interview_id() -> str:
    return uuid4().hex


def interview_link(interview_id: str) -> str:
    return f"{settings.public_base_url.rstrip('/')}/interview/{interview_id}"


async def resolve_questions(
    questions: Optional[List[Dict[str, Any]]],
    generator: QuestionGenerator,
    *,
    interview_type: InterviewType,
    count: int,
    difficulty: Optional[str],
    job_position: str,
    job_description: str = "",
    programming_language: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Return the given question documents, or generate ``count`` of them."""
    if questions is not None:
        return questions
    generated = await generator.generate(
        interview_type,
        count,
        difficulty=difficulty,
        job_position=job_position,
        job_description=job_description,
        programming_language=programming_language,
    )
    logger.info(f"Generated {len(generated)} {interview_type.value} question(s) for {job_position}")
    return [q.model_dump(mode="json", by_alias=True) for q in generated]


def build_interview(
    *,
    company_id: str,
    job_position: str,
    interview_type: InterviewType,
    questions: List[Dict[str, Any]],
    candidate_email: str,
    candidate_name: Optional[str] = None,
    job_description: str = "",
    job_experience: str = "",
    programming_language: Optional[str] = None,
    time_limit_minutes: Optional[int] = None,
    link_valid_hours: Optional[int] = None,
    campaign_id: Optional[str] = None,
) -> Interview:
    """Validate a question set and build an unsaved ``Interview``.

    Raises:
        ValidationError: If the questions do not parse for ``interview_type``
    """
    parsed = parse_questions(questions, interview_type)
    interview_id = new_interview_id()
    return Interview(
        interview_id=interview_id,
        company_id=company_id,
        campaign_id=campaign_id,
        job_position=job_position,
        job_description=job_description,
        job_experience=job_experience,
        interview_questions=dump_questions(parsed),
        interview_type=interview_type.value,
        programming_language=programming_language,
        time_limit_minutes=time_limit_minutes,
        candidate_name=candidate_name,
        candidate_email=candidate_email.strip().lower(),
        interview_link=interview_link(interview_id),
        link_expiry_time=utc_now() + timedelta(hours=link_valid_hours) if link_valid_hours else None,
    )


def to_interview_read(interview: Interview) -> InterviewRead:
    try:
        question_count = len(json.loads(interview.interview_questions or "[]"))
    except json.JSONDecodeError:
        question_count = 0
    read = InterviewRead.model_validate(interview)
    read.question_count = question_count
    return read
