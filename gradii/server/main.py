"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request monitoring), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gradii.core.database import init_db
from gradii.core.logging_config import get_logger, setup_logging
from gradii.core.monitoring import initialize_logfire
from gradii.integrations.redis_client import close_redis

from .api.v1 import (
    admin_sessions,
    analytics,
    campaigns,
    candidate_access,
    code_execution,
    companies,
    health,
    interview_flow,
    interview_results,
    interviews,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.deps import close_piston_client

# Initialize logging
setup_logging(log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the database tables on startup and closes the shared Redis and
    Piston clients on shutdown.
    """
    # Startup
    try:
        logger.info("Starting up Gradii Interview Service...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down Gradii Interview Service...")
    await close_piston_client()
    await close_redis()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Gradii Interview Service API

    This API provides the backend for OTP-gated candidate interviews.
    It supports MCQ, coding, behavioral and combo interviews, scores answers as they are
    submitted, runs candidate code in a sandbox and stores analysed results.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)


app.include_router(health.router, tags=["health"])
app.include_router(
    candidate_access.router, prefix=f"{constant.API_V1_STR}/interview", tags=["candidate-access"]
)
app.include_router(interview_flow.router, prefix=f"{constant.API_V1_STR}/interview/flow", tags=["interview-flow"])
app.include_router(interview_results.router, prefix=f"{constant.API_V1_STR}/interview", tags=["interview-flow"])
app.include_router(code_execution.router, prefix=f"{constant.API_V1_STR}/coding/execute", tags=["code-execution"])
app.include_router(companies.router, prefix=f"{constant.API_V1_STR}/companies", tags=["admin"])
app.include_router(interviews.router, prefix=f"{constant.API_V1_STR}/interviews", tags=["admin"])
app.include_router(campaigns.router, prefix=f"{constant.API_V1_STR}/campaigns", tags=["admin"])
app.include_router(analytics.router, prefix=f"{constant.API_V1_STR}/analytics", tags=["admin"])
app.include_router(admin_sessions.router, prefix=f"{constant.API_V1_STR}/admin/sessions", tags=["admin"])


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run("gradii.server.main:app", host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    run()
