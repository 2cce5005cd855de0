"""
Unit tests for server exception handlers.

Tests cover the ApiError envelope, the Retry-After header of rate limit
errors and the global handler for unexpected exceptions.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from gradii.core.errors import (
    AuthenticationError,
    ConflictError,
    FlowStateError,
    LinkExpiredError,
    NotFoundError,
    RateLimitError,
    UpstreamServiceError,
    ValidationError,
)
from gradii.server.exception_handlers import setup_exception_handlers
from gradii.server.exception_handlers.api_error_handler import api_error_handler
from gradii.server.exception_handlers.global_handler import global_exception_handler


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/v1/test"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


class TestApiErrorHandler:
    """Test suite for the ApiError envelope."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc,status,code",
        [
            (ValidationError("bad"), 400, "VALIDATION_ERROR"),
            (AuthenticationError(), 401, "AUTHENTICATION_ERROR"),
            (NotFoundError("Interview"), 404, "NOT_FOUND"),
            (ConflictError("taken"), 409, "CONFLICT"),
            (FlowStateError("not started"), 409, "FLOW_STATE_ERROR"),
            (LinkExpiredError(), 410, "LINK_EXPIRED"),
            (UpstreamServiceError("piston down"), 502, "UPSTREAM_ERROR"),
        ],
    )
    async def test_status_and_code(self, mock_request, exc, status, code):
        response = await api_error_handler(mock_request, exc)

        assert response.status_code == status
        assert json.loads(response.body)["error"]["code"] == code

    @pytest.mark.asyncio
    async def test_envelope_includes_details_only_when_given(self, mock_request):
        plain = json.loads((await api_error_handler(mock_request, ValidationError("bad"))).body)
        detailed = json.loads(
            (await api_error_handler(mock_request, ValidationError("bad", details={"field": "otp"}))).body
        )

        assert plain == {"error": {"code": "VALIDATION_ERROR", "message": "bad"}}
        assert detailed["error"]["details"] == {"field": "otp"}

    @pytest.mark.asyncio
    async def test_not_found_message(self, mock_request):
        response = await api_error_handler(mock_request, NotFoundError("Interview"))

        assert json.loads(response.body)["error"]["message"] == "Interview not found"

    @pytest.mark.asyncio
    async def test_rate_limit_sets_retry_after(self, mock_request):
        response = await api_error_handler(mock_request, RateLimitError(details={"retry_after": 42}))

        assert response.status_code == 429
        assert response.headers["retry-after"] == "42"


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    @pytest.mark.asyncio
    async def test_exception_handler_logs_error(self, mock_request):
        """Test that exception handler logs errors."""
        exc = ValueError("Test error")

        with patch("gradii.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"
            assert call_args[1]["extra"]["path"] == "/api/v1/test"

    @pytest.mark.asyncio
    async def test_exception_handler_response_body(self, mock_request):
        """Test that exception handler returns a 500 JSON body with error id and type."""
        exc = RuntimeError("Test error")

        with patch("gradii.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, exc)

        assert isinstance(response, JSONResponse)
        assert response.status_code == 500
        body = json.loads(response.body.decode())
        assert body["detail"] == "Internal server error"
        assert body["error_id"] == id(exc)
        assert body["error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_exception_handler_without_client(self, mock_request):
        """Test that a request without client info is logged as unknown."""
        mock_request.client = None

        with patch("gradii.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, RuntimeError("boom"))

            assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"


class TestSetupExceptionHandlers:
    """Test suite for handler registration on an application."""

    @pytest.fixture
    def app(self) -> FastAPI:
        app = FastAPI()
        setup_exception_handlers(app)

        @app.get("/not-found")
        async def not_found():
            raise NotFoundError("Interview")

        @app.get("/items/{item_id}")
        async def item(item_id: int):
            return {"item_id": item_id}

        @app.get("/boom")
        async def boom():
            raise RuntimeError("unexpected")

        return app

    def test_handlers_registered(self, app):
        from gradii.core.errors import ApiError

        assert ApiError in app.exception_handlers
        assert RequestValidationError in app.exception_handlers
        assert Exception in app.exception_handlers

    @pytest.mark.asyncio
    async def test_api_error_through_app(self, app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            response = await client.get("/not-found")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unexpected_error_through_app(self, app):
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://localhost") as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error_type"] == "RuntimeError"

    @pytest.mark.asyncio
    async def test_request_validation_error_uses_envelope(self, app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            response = await client.get("/items/not-a-number")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Request validation failed"
        assert error["details"][0]["loc"] == ["path", "item_id"]
        assert error["details"][0]["type"] == "int_parsing"
