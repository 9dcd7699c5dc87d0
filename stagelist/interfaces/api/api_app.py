"""
FastAPI application setup and configuration.
Main entry point for the stagelist API service.

Architecture:
- Every route lives under the /api prefix (see web/router.py)
- Endpoints authenticate with a bearer token resolved by the ActorDirectory
- Domain failures arrive as OperationResults and are mapped in errors.py
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from stagelist.__version__ import __version__
from stagelist.helpers.exceptions import SetListError
from stagelist.helpers.logging_helper import sanitize_exception_message
from stagelist.interfaces.api import web
from stagelist.interfaces.api.errors import STATUS_FOR_KIND

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
#  App lifecycle
# ----------------------------------------------------------------------
@asynccontextmanager
async def lifespan(_app_instance: FastAPI):
    """
    FastAPI lifespan context manager.

    Application.start() is called by start.py (or the test fixture) before the
    app serves requests; shutdown stops it.
    """
    from stagelist.app import application

    logger.info("[API] FastAPI starting (Application already initialized)")
    try:
        yield
    finally:
        logger.info("[API] FastAPI shutting down...")
        application.stop()
        logger.info("[API] Shutdown complete")


def create_app() -> FastAPI:
    app = FastAPI(title="Stagelist", version=__version__, lifespan=lifespan)

    @app.exception_handler(SetListError)
    async def setlist_error_handler(_request: Request, exc: SetListError):
        status = STATUS_FOR_KIND.get(exc.kind, 500)
        return JSONResponse(status_code=status, content={"detail": sanitize_exception_message(exc, "Setlist error")})

    @app.exception_handler(Exception)
    async def exception_handler(_request: Request, exc: Exception):
        logger.exception(f"[API] Exception: {exc}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(web.router)
    return app


api_app = create_app()
