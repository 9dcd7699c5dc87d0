"""
FastAPI dependency injection helpers for web endpoints.

ARCHITECTURE:
- Endpoints should ONLY inject services, never gateways or raw infrastructure
- Services encapsulate all business logic and data access
- Endpoints are thin presentation layers that call services and format responses
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import HTTPException

if TYPE_CHECKING:
    from stagelist.helpers.dto.gesture_dto import GestureThresholds
    from stagelist.services.config_svc import ConfigService
    from stagelist.services.setlist_admin_svc import SetListAdminService
    from stagelist.services.setlist_svc import SetListService


def get_setlist_service() -> SetListService:
    """Get SetListService instance."""
    from stagelist.app import application

    service = application.services.get("setlist")
    if service is None:
        raise HTTPException(status_code=503, detail="Setlist service not available")
    return service  # type: ignore[no-any-return]


def get_setlist_admin_service() -> SetListAdminService:
    """Get SetListAdminService instance."""
    from stagelist.app import application

    service = application.services.get("setlist_admin")
    if service is None:
        raise HTTPException(status_code=503, detail="Setlist admin service not available")
    return service  # type: ignore[no-any-return]


def get_gesture_thresholds() -> GestureThresholds:
    from stagelist.app import application

    return application.gesture_thresholds


def get_config_service() -> ConfigService:
    from stagelist.app import application

    return application.get_service("config")  # type: ignore[no-any-return]


def is_application_running() -> bool:
    from stagelist.app import application

    return application.is_running()
