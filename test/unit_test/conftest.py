"""Shared fixtures: in-memory SQLite repositories, fake Redis and question sets."""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel.pool import StaticPool

from gradii.core.database.base import utc_now
from gradii.core.database.entities import Company, Interview
from gradii.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from gradii.core.database.utils import create_all

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with maker() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator[FakeAsyncRedis, None]:
    client = FakeAsyncRedis(decode_responses=True)
    await client.flushall()
    yield client
    await client.flushall()
    await client.aclose()


# =====================================================================
# Question sets
# =====================================================================


def mcq_documents() -> List[Dict[str, Any]]:
    return [
        {
            "id": "m1",
            "type": "mcq",
            "question": "Which data structure is FIFO?",
            "options": [
                {"id": "a", "text": "Stack"},
                {"id": "b", "text": "Queue", "isCorrect": True},
                {"id": "c", "text": "Tree"},
            ],
            "correctAnswer": "b",
            "explanation": "A queue serves elements in insertion order.",
        },
        {
            "id": "m2",
            "type": "mcq",
            "question": "What is the average lookup cost of a hash map?",
            "options": [
                {"id": "a", "text": "O(1)"},
                {"id": "b", "text": "O(n)"},
            ],
            "correctAnswer": "a",
            "timeLimit": 90,
        },
    ]


def coding_documents() -> List[Dict[str, Any]]:
    return [
        {
            "id": "c1",
            "type": "coding",
            "question": "Two Sum",
            "description": "Return indices of the two numbers adding up to target.",
            "examples": [{"input": "[2,7,11,15], 9", "output": "[0,1]"}],
            "solution": {"python": "def two_sum(nums, target):\n    seen = {}\n    for i, n in enumerate(nums):\n        ..."},
            "testCases": [{"input": "[2,7,11,15]\n9", "expectedOutput": "[0, 1]"}],
            "difficulty": "easy",
        }
    ]


def behavioral_documents() -> List[Dict[str, Any]]:
    return [
        {
            "id": "b1",
            "type": "behavioral",
            "question": "Tell me about a time you resolved a conflict within your team.",
            "keyPoints": ["listening", "compromise"],
            "category": "Teamwork",
            "expectedKeywords": ["conflict", "team", "resolved"],
        }
    ]


def combo_documents() -> List[Dict[str, Any]]:
    return mcq_documents()[:1] + coding_documents() + behavioral_documents()


PYTHON_SOLUTION = (
    "def two_sum(nums, target):\n"
    "    seen = {}\n"
    "    for i, n in enumerate(nums):\n"
    "        if target - n in seen:\n"
    "            return [seen[target - n], i]\n"
    "        seen[n] = i\n"
    "    return []\n"
)

STAR_ANSWER = (
    "In my previous role at a fintech company, our team had a conflict about the release plan. "
    "My task was to align the backend and mobile developers before the deadline. "
    "First, I organized a meeting where everyone explained their concerns, then I implemented "
    "a shared checklist and led daily syncs for two weeks. As a result we delivered the release "
    "on time, reduced production incidents by 40% and the team resolved the disagreement for good."
)


# =====================================================================
# Entity factories
# =====================================================================


@pytest_asyncio.fixture
async def company(repos: SqlRepoBundle) -> Company:
    return await repos.companies.create(Company(name="Acme", email="hr@acme.test", domain="acme.test"))


@pytest.fixture
def make_interview(repos: SqlRepoBundle, company: Company):
    """Factory persisting an interview addressed to a candidate."""

    async def _make(
        interview_id: str = "int-1",
        interview_type: str = "mcq",
        questions: Optional[List[Dict[str, Any]]] = None,
        candidate_email: str = "candidate@example.com",
        expires_in_hours: Optional[int] = 24,
        status: str = "scheduled",
        campaign_id: Optional[str] = None,
    ) -> Interview:
        documents = {
            "mcq": mcq_documents,
            "coding": coding_documents,
            "behavioral": behavioral_documents,
            "combo": combo_documents,
        }[interview_type]
        interview = Interview(
            interview_id=interview_id,
            company_id=company.id,
            campaign_id=campaign_id,
            job_position="Backend Engineer",
            job_experience="3-5 years",
            interview_questions=json.dumps(questions if questions is not None else documents()),
            interview_type=interview_type,
            programming_language="python",
            candidate_name="Casey Candidate",
            candidate_email=candidate_email,
            interview_status=status,
            interview_link=f"http://localhost:3000/interview/{interview_id}",
            link_expiry_time=utc_now() + timedelta(hours=expires_in_hours) if expires_in_hours is not None else None,
        )
        return await repos.interviews.create(interview)

    return _make


@pytest.fixture
def mcq_docs() -> List[Dict[str, Any]]:
    return mcq_documents()


@pytest.fixture
def coding_docs() -> List[Dict[str, Any]]:
    return coding_documents()


@pytest.fixture
def behavioral_docs() -> List[Dict[str, Any]]:
    return behavioral_documents()


@pytest.fixture
def combo_docs() -> List[Dict[str, Any]]:
    return combo_documents()


@pytest.fixture
def python_solution() -> str:
    return PYTHON_SOLUTION


@pytest.fixture
def star_answer() -> str:
    return STAR_ANSWER
