from dataclasses import dataclass, field
from typing import Any, AsyncGenerator, Dict, List, Optional
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from gradii.access.mailer import EmailService
from gradii.access.session_manager import InterviewSessionManager
from gradii.core.database import get_session
from gradii.integrations.piston import PistonClient
from gradii.interview.analysis import InterviewAnalyzer
from gradii.interview.generation import QuestionGenerator
from gradii.server.core.config import SMTPConfig, settings
from gradii.server.main import app
from gradii.server.services.deps import (
    get_analyzer,
    get_email_service,
    get_piston_client,
    get_question_generator,
    get_redis_client,
)

ADMIN_API_KEY = "test-admin-key"


@dataclass
class PistonStub:
    """In-memory stand-in for the Piston HTTP API."""

    execute_json: Dict[str, Any] = field(
        default_factory=lambda: {"run": {"stdout": "hello\n", "stderr": "", "code": 0}}
    )
    status_code: int = 200
    runtimes_json: List[Dict[str, str]] = field(
        default_factory=lambda: [{"language": "python", "version": "3.10.0"}]
    )
    requests: List[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"message": "unavailable"})
        if request.url.path.endswith("/runtimes"):
            return httpx.Response(200, json=self.runtimes_json)
        return httpx.Response(200, json=self.execute_json)


@pytest.fixture
def piston() -> PistonStub:
    return PistonStub()


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, redis_client, piston: PistonStub) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    piston_client = PistonClient(
        "http://mock-piston", client=httpx.AsyncClient(transport=httpx.MockTransport(piston.handler))
    )

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_redis_client] = lambda: redis_client
    app.dependency_overrides[get_piston_client] = lambda: piston_client
    app.dependency_overrides[get_analyzer] = lambda: InterviewAnalyzer()
    app.dependency_overrides[get_question_generator] = lambda: QuestionGenerator()
    app.dependency_overrides[get_email_service] = lambda: EmailService(SMTPConfig())

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("gradii.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()
    await piston_client.aclose()


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"X-API-Key": ADMIN_API_KEY}


@pytest.fixture
def candidate_headers(redis_client):
    """Factory creating a verified candidate session and returning its cookie header."""

    async def _make(email: str = "candidate@example.com", interview_id: Optional[str] = None) -> Dict[str, str]:
        manager = InterviewSessionManager(redis_client, ttl_seconds=settings.interview_session.ttl_seconds)
        session = await manager.create_session(email, interview_id=interview_id)
        return {"Cookie": f"{settings.interview_session.cookie_name}={session.id}"}

    return _make
