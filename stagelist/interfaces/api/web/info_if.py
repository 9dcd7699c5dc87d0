"""System info and health endpoints."""

from fastapi import APIRouter, Depends

from stagelist.interfaces.api.auth import get_current_actor
from stagelist.interfaces.api.types.info_types import HealthStatusResponse, SystemInfoResponse
from stagelist.interfaces.api.web.dependencies import get_config_service, is_application_running
from stagelist.services.config_svc import ConfigService

router = APIRouter(prefix="", tags=["Info"])


@router.get("/info", dependencies=[Depends(get_current_actor)])
async def info(config_service: ConfigService = Depends(get_config_service)) -> SystemInfoResponse:
    return SystemInfoResponse.from_dto(config_service.get_internal_info())


@router.get("/health")
async def health(running: bool = Depends(is_application_running)) -> HealthStatusResponse:
    """Unauthenticated liveness check."""
    return HealthStatusResponse(status="ok" if running else "stopped")
