"""
Health Check Endpoints.

This module provides system status endpoints (health, version, Redis and
database connectivity) used for monitoring and deployment verification.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from gradii.core.logging_config import get_logger
from gradii.integrations.redis_client import ping
from gradii.server.core import constant
from gradii.server.services.deps import RedisDep, SessionDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server.",
    response_description="Status object.",
)
async def health_check():
    """
    Health check endpoint.

    Returns a simple status indicator to confirm the server is running and reachable.
    """
    return {"status": "ok"}


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    """
    Get API version.

    Returns the current semantic version of the API and supported schema version.
    """
    return {"version": constant.VERSION, "schema_version": constant.SCHEMA_VERSION}


@router.get(
    "/health/redis",
    summary="Redis Health",
    description="Ping the Redis server backing sessions, flows and rate limits.",
    responses={503: {"description": "Redis is unreachable"}},
)
async def redis_health(redis: RedisDep):
    if await ping(redis):
        return {"status": "ok", "redis": "ok"}
    return JSONResponse(status_code=503, content={"status": "error", "redis": "error"})


@router.get(
    "/health/database",
    summary="Database Health",
    description="Run a trivial query against the application database.",
    responses={503: {"description": "Database is unreachable"}},
)
async def database_health(session: SessionDep):
    try:
        await session.exec(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "error", "database": "error"})
    return {"status": "ok", "database": "ok"}
