"""
Monitoring and Tracing Configuration Module.

This module provides optional integration with Pydantic Logfire for tracing
the interview service:
- API endpoint tracing
- Database and HTTPX instrumentation
- Interview lifecycle events (flow initialized, interview completed)
- LLM analysis calls

Logfire is only configured when ``LOGFIRE_ENABLED`` is set; every helper in
this module degrades to a debug log line when Logfire is unavailable.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)

LOGFIRE_ENABLED = os.getenv("LOGFIRE_ENABLED", "false").lower() in ("true", "1", "yes")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "gradii-interview")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "0.0.0")

LOGFIRE_TRACE_SQLALCHEMY = os.getenv("LOGFIRE_TRACE_SQLALCHEMY", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_HTTPX = os.getenv("LOGFIRE_TRACE_HTTPX", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_FASTAPI = os.getenv("LOGFIRE_TRACE_FASTAPI", "true").lower() in ("true", "1", "yes")
LOGFIRE_TRACE_PYDANTIC_AI = os.getenv("LOGFIRE_TRACE_PYDANTIC_AI", "true").lower() in ("true", "1", "yes")


def initialize_logfire(app: FastAPI | None = None) -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    Args:
        app: FastAPI application instance for endpoint instrumentation (optional).

    Returns:
        True when Logfire was configured.
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning("Logfire is enabled but LOGFIRE_TOKEN is not set. Monitoring will not work.")
        return False

    try:
        import logfire

        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
        )

        if LOGFIRE_TRACE_PYDANTIC_AI:
            try:
                logfire.instrument_pydantic_ai()
                logger.info("Logfire: Pydantic AI instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument Pydantic AI: {e}")

        if LOGFIRE_TRACE_SQLALCHEMY:
            try:
                logfire.instrument_sqlalchemy()
                logger.info("Logfire: SQLAlchemy instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument SQLAlchemy: {e}")

        if LOGFIRE_TRACE_HTTPX:
            try:
                logfire.instrument_httpx()
                logger.info("Logfire: HTTPX instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument HTTPX: {e}")

        if LOGFIRE_TRACE_FASTAPI and app is not None:
            try:
                logfire.instrument_fastapi(app=app)
                logger.info("Logfire: FastAPI instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument FastAPI: {e}")

        logger.info(
            f"Logfire monitoring initialized: environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}"
        )
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Log an API request with performance metrics.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    try:
        import logfire

        logfire.info(
            "API request completed",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log API request to Logfire: {method} {path}")


def log_flow_initialized(interview_id: str, interview_type: str, flow_type: str, resumed: bool) -> None:
    """Log the start (or resumption) of an interview flow."""
    try:
        import logfire

        logfire.info(
            "Interview flow initialized",
            interview_id=interview_id,
            interview_type=interview_type,
            flow_type=flow_type,
            resumed=resumed,
        )
    except Exception:
        logger.debug(f"Could not log flow initialization to Logfire: interview_id={interview_id}")


def log_interview_completion(interview_id: str, percentage: float, passed: bool, duration_seconds: float) -> None:
    """
    Log the completion of an interview.

    Args:
        interview_id: The interview identifier
        percentage: Final score percentage
        passed: Whether the passing score was reached
        duration_seconds: Total time spent answering
    """
    try:
        import logfire

        logfire.info(
            "Interview completed",
            interview_id=interview_id,
            percentage=percentage,
            passed=passed,
            duration_seconds=duration_seconds,
        )
    except Exception:
        logger.debug(f"Could not log interview completion to Logfire: interview_id={interview_id}")


def log_llm_call(model: str, purpose: str, succeeded: bool) -> None:
    """Log an LLM call made by the analysis layer."""
    try:
        import logfire

        logfire.info("LLM call completed", model=model, purpose=purpose, succeeded=succeeded)
    except Exception:
        logger.debug(f"Could not log LLM call to Logfire: model={model}")


def log_code_execution(language: str, success: bool, exit_code: Optional[int], duration_ms: float) -> None:
    """
    Log a sandboxed code execution.

    Args:
        language: Language the code ran as
        success: Whether the run exited cleanly with no stderr
        exit_code: Process exit code, if the sandbox reported one
        duration_ms: Round trip to the sandbox in milliseconds
    """
    try:
        import logfire

        logfire.info(
            "Code executed",
            language=language,
            success=success,
            exit_code=exit_code,
            duration_ms=duration_ms,
        )
    except Exception:
        logger.debug(f"Could not log code execution to Logfire: language={language}")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """
    Log an error with context for debugging.

    Args:
        error_type: Type of error
        error_message: Error message
        context: Additional context dictionary
    """
    try:
        import logfire

        logfire.error(f"{error_type}: {error_message}", **(context or {}))
    except Exception:
        logger.debug(f"Could not log error to Logfire: {error_type}")
