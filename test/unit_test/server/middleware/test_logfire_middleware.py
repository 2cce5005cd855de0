"""
Unit tests for Logfire middleware.

This test suite covers:
- Request/response processing
- Error handling and exception tracking
- Slow request detection
- Header injection
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from starlette.responses import Response

from gradii.server.middleware.logfire_middleware import SLOW_REQUEST_MS, LogfireMiddleware


def _request(method: str = "GET", path: str = "/api/v1/interview/session"):
    mock_request = AsyncMock(spec=Request)
    mock_request.method = method
    mock_request.url.path = path
    mock_request.url.query = ""
    mock_request.state = MagicMock()
    return mock_request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_middleware_processes_successful_request(self):
        """Test that middleware logs method, path and status of a request."""

        async def mock_call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("gradii.server.middleware.logfire_middleware.log_api_request") as mock_log:
            response = await middleware.dispatch(_request(), mock_call_next)

        assert response.status_code == 200
        mock_log.assert_called_once()
        call_args = mock_log.call_args
        assert call_args[1]["method"] == "GET"
        assert call_args[1]["path"] == "/api/v1/interview/session"
        assert call_args[1]["status_code"] == 200
        assert call_args[1]["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_middleware_adds_process_time_header(self):
        """Test that middleware adds X-Process-Time header."""

        async def mock_call_next(request):
            return Response(content="ok", status_code=201)

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch("gradii.server.middleware.logfire_middleware.log_api_request"):
            response = await middleware.dispatch(_request("POST", "/api/v1/interviews"), mock_call_next)

        assert "X-Process-Time" in response.headers
        assert float(response.headers["X-Process-Time"]) >= 0

    @pytest.mark.asyncio
    async def test_middleware_logs_and_reraises_exceptions(self):
        """Test that a failing handler is recorded as a 500 and the exception propagates."""

        async def mock_call_next(request):
            raise RuntimeError("handler exploded")

        middleware = LogfireMiddleware(app=AsyncMock())

        with (
            patch("gradii.server.middleware.logfire_middleware.log_api_request") as mock_log,
            patch("gradii.server.middleware.logfire_middleware.logger") as mock_logger,
        ):
            with pytest.raises(RuntimeError):
                await middleware.dispatch(_request(), mock_call_next)

        assert mock_log.call_args[1]["status_code"] == 500
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["extra"]["error"] == "handler exploded"

    @pytest.mark.asyncio
    async def test_middleware_warns_on_slow_request(self):
        """Test that requests slower than the threshold produce a warning."""

        async def mock_call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())
        start = 1000.0
        end = start + (SLOW_REQUEST_MS + 500) / 1000

        with (
            patch("gradii.server.middleware.logfire_middleware.time.time", side_effect=[start, end]),
            patch("gradii.server.middleware.logfire_middleware.log_api_request"),
            patch("gradii.server.middleware.logfire_middleware.logger") as mock_logger,
        ):
            await middleware.dispatch(_request(), mock_call_next)

        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_middleware_fast_request_does_not_warn(self):
        async def mock_call_next(request):
            return Response(content="ok", status_code=200)

        middleware = LogfireMiddleware(app=AsyncMock())

        with (
            patch("gradii.server.middleware.logfire_middleware.time.time", side_effect=[1000.0, 1000.01]),
            patch("gradii.server.middleware.logfire_middleware.log_api_request"),
            patch("gradii.server.middleware.logfire_middleware.logger") as mock_logger,
        ):
            await middleware.dispatch(_request(), mock_call_next)

        mock_logger.warning.assert_not_called()
