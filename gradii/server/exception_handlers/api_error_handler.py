"""
Handler for deliberate application errors.

Turns an ``ApiError`` raised anywhere below an endpoint into the JSON error
envelope with the error's own status code.
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gradii.core.errors import ApiError, RateLimitError, ValidationError
from gradii.core.logging_config import get_logger

logger = get_logger(__name__)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """
    Render an ``ApiError`` as ``{"error": {"code", "message", "details"}}``.

    Args:
        request: The HTTP request that caused the error
        exc: The raised ApiError

    Returns:
        JSONResponse carrying the error's status code
    """
    log = logger.warning if exc.status_code >= 500 else logger.info
    log(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")

    headers = None
    if isinstance(exc, RateLimitError) and isinstance(exc.details, dict) and "retry_after" in exc.details:
        headers = {"Retry-After": str(exc.details["retry_after"])}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()}, headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render FastAPI request validation failures as a ``ValidationError`` envelope.

    Body, query and header errors answer 400 ``VALIDATION_ERROR`` with one
    ``{"loc", "msg", "type"}`` entry per failing field in ``details``.
    """
    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return await api_error_handler(request, ValidationError("Request validation failed", details=details))
