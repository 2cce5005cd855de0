"""
Application error types.

Every error raised deliberately by the service layer derives from ``ApiError``.
The server registers a handler that turns these into the JSON envelope::

    {"error": {"code": "...", "message": "...", "details": ...}}

with the HTTP status carried by the error.
"""

from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """Base class for errors that map to a client-visible HTTP response."""

    code: str = "API_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    code = "VALIDATION_ERROR"
    status_code = 400


class AuthenticationError(ApiError):
    code = "AUTHENTICATION_ERROR"
    status_code = 401

    def __init__(self, message: str = "Authentication required", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class AuthorizationError(ApiError):
    code = "AUTHORIZATION_ERROR"
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(ApiError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str = "Resource", **kwargs: Any) -> None:
        super().__init__(f"{resource} not found", **kwargs)


class ConflictError(ApiError):
    code = "CONFLICT"
    status_code = 409

    def __init__(self, message: str = "Resource conflict", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class FlowStateError(ConflictError):
    """Raised when an interview flow operation does not fit the flow's current state."""

    code = "FLOW_STATE_ERROR"


class LinkExpiredError(ApiError):
    code = "LINK_EXPIRED"
    status_code = 410

    def __init__(self, message: str = "Interview link has expired", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class RateLimitError(ApiError):
    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class UpstreamServiceError(ApiError):
    """Raised when a third-party service (Piston, SMTP, LLM) fails."""

    code = "UPSTREAM_ERROR"
    status_code = 502
