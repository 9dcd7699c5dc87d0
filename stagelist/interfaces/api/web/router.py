"""
Combined router for all setlist endpoints.

Aggregates the per-area routers into one router mounted under the API prefix.
"""

from fastapi import APIRouter

from stagelist.interfaces.api.web import gesture_if, info_if, setlist_if
from stagelist.services.config_svc import INTERNAL_API_PREFIX

router = APIRouter(prefix=INTERNAL_API_PREFIX)

router.include_router(setlist_if.router)
router.include_router(gesture_if.router)
router.include_router(info_if.router)
