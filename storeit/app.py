"""
FastAPI application entry point for the StoreIt backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storeit.config import get_settings
from storeit.results import InfrastructureError, NotAuthenticated
from storeit.routes import router

logger = logging.getLogger(__name__)


async def _infrastructure_error_handler(request: Request, exc: InfrastructureError):
    logger.error("Backend service error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": "Backend service error"})


async def _not_authenticated_handler(request: Request, exc: NotAuthenticated):
    return JSONResponse(status_code=401, content={"detail": "Not authenticated"})


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper())
    app = FastAPI(title="StoreIt Backend (FastAPI)", version="0.1.0")
    app.include_router(router, prefix=settings.api_prefix)
    app.add_exception_handler(InfrastructureError, _infrastructure_error_handler)
    app.add_exception_handler(NotAuthenticated, _not_authenticated_handler)
    return app


app = create_app()
