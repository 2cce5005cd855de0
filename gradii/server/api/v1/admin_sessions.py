"""
Session Administration Endpoints.
"""

from fastapi import APIRouter, Depends

from gradii.core.logging_config import get_logger
from gradii.core.models.io.admin import ActiveSessionsResponse, SessionCleanupResponse
from gradii.server.services.deps import OTPServiceDep, SessionManagerDep, require_admin_key

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_admin_key)])


@router.post(
    "/cleanup",
    response_model=SessionCleanupResponse,
    summary="Clean Up Expired Sessions",
    description="Remove expired interview sessions and expired OTP codes.",
)
async def cleanup(manager: SessionManagerDep, otp_service: OTPServiceDep) -> SessionCleanupResponse:
    sessions_removed = await manager.cleanup_expired_sessions()
    otps_removed = await otp_service.cleanup_expired()
    logger.info(f"Cleanup removed {sessions_removed} sessions and {otps_removed} OTP codes")
    return SessionCleanupResponse(expired_sessions_removed=sessions_removed, expired_otps_removed=otps_removed)


@router.get(
    "",
    response_model=ActiveSessionsResponse,
    summary="Active Session Count",
)
async def active_sessions(manager: SessionManagerDep) -> ActiveSessionsResponse:
    sessions = await manager.get_all_active_sessions()
    return ActiveSessionsResponse(active_sessions=len(sessions))
