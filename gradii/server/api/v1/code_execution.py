"""
Code Execution Endpoints.

Runs candidate code in the Piston sandbox. Requests are rate limited per
client IP.
"""

import time

from fastapi import APIRouter, Request

from gradii.core.errors import RateLimitError, UpstreamServiceError
from gradii.core.logging_config import get_logger
from gradii.core.monitoring import log_code_execution
from gradii.core.models.io.code_execution import (
    ExecuteCodeRequest,
    ExecuteCodeResponse,
    ExecutionStatusResponse,
)
from gradii.integrations.piston import PistonClient
from gradii.server.services.deps import PistonDep, RateLimiterDep, get_client_ip

logger = get_logger(__name__)

router = APIRouter()

EXECUTE_RATE_LIMIT = 30
EXECUTE_RATE_WINDOW_SECONDS = 60


@router.post(
    "",
    response_model=ExecuteCodeResponse,
    summary="Execute Code",
    description="Run a java, python, cpp or php snippet and return its output.",
    responses={
        400: {"description": "Unsupported language or empty code"},
        429: {"description": "Too many executions"},
        502: {"description": "Execution service failed"},
    },
)
async def execute_code(
    body: ExecuteCodeRequest,
    request: Request,
    piston: PistonDep,
    limiter: RateLimiterDep,
) -> ExecuteCodeResponse:
    client_ip = get_client_ip(request)
    limit = await limiter.check(f"code_exec:{client_ip}", EXECUTE_RATE_LIMIT, EXECUTE_RATE_WINDOW_SECONDS)
    if not limit.allowed:
        raise RateLimitError(
            "Too many code executions. Please slow down.",
            details={"retry_after": limit.retry_after_seconds},
        )

    started = time.perf_counter()
    result = await piston.execute(body.language, body.code, body.input)
    log_code_execution(result.language, result.success, result.exit_code, (time.perf_counter() - started) * 1000)
    if not result.success:
        logger.debug(f"Execution failed for {result.language} with exit code {result.exit_code}")
    return ExecuteCodeResponse(
        success=result.success,
        output=result.output,
        error=result.error,
        exit_code=result.exit_code,
        language=result.language,
        version=result.version,
    )


@router.get(
    "",
    response_model=ExecutionStatusResponse,
    summary="Execution Service Status",
    description="Report whether the sandbox is reachable and which languages are supported.",
)
async def execution_status(piston: PistonDep) -> ExecutionStatusResponse:
    try:
        runtime_count = await piston.runtimes()
    except UpstreamServiceError as e:
        logger.warning(f"Piston status check failed: {e}")
        return ExecutionStatusResponse(
            status="unavailable",
            supported_languages=PistonClient.supported_languages(),
        )
    return ExecutionStatusResponse(
        status="operational",
        supported_languages=PistonClient.supported_languages(),
        runtime_count=runtime_count,
    )
