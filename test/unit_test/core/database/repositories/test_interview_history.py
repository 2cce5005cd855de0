"""Unit tests for the interview history repository."""

from datetime import timedelta

import pytest

from gradii.core.database.base import utc_now
from gradii.core.database.entities.interview_history import CandidateInterviewHistory

pytestmark = pytest.mark.asyncio


def _result(interview_id: str, email: str, score: int, minutes_ago: int) -> CandidateInterviewHistory:
    return CandidateInterviewHistory(
        candidate_email=email,
        interview_id=interview_id,
        interview_type="mcq",
        score=score,
        max_score=100,
        passed=score >= 70,
        completed_at=utc_now() - timedelta(minutes=minutes_ago),
    )


async def test_get_latest_for_interview(repos):
    await repos.history.create(_result("int-1", "casey@example.com", 40, minutes_ago=30))
    await repos.history.create(_result("int-1", "casey@example.com", 90, minutes_ago=5))
    await repos.history.create(_result("int-1", "other@example.com", 10, minutes_ago=1))

    latest = await repos.history.get_latest_for_interview("int-1", "Casey@Example.com")
    any_candidate = await repos.history.get_latest_for_interview("int-1")

    assert latest.score == 90
    assert any_candidate.candidate_email == "other@example.com"
    assert await repos.history.get_latest_for_interview("int-2") is None


async def test_list_for_interviews(repos):
    await repos.history.create(_result("int-1", "a@example.com", 50, minutes_ago=3))
    await repos.history.create(_result("int-2", "b@example.com", 80, minutes_ago=2))
    await repos.history.create(_result("int-3", "c@example.com", 70, minutes_ago=1))

    records = await repos.history.list_for_interviews(["int-1", "int-2"])

    assert {r.interview_id for r in records} == {"int-1", "int-2"}
    assert await repos.history.list_for_interviews([]) == []


async def test_list_newest_first(repos):
    await repos.history.create(_result("int-1", "a@example.com", 50, minutes_ago=10))
    await repos.history.create(_result("int-2", "b@example.com", 80, minutes_ago=1))

    records = await repos.history.list(filters={"interview_type": "mcq"})

    assert [r.interview_id for r in records] == ["int-2", "int-1"]
