"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from storeit.actions.users import get_current_user
from storeit.config import get_settings
from storeit.gateway import AppwriteGateway, BackendGateway, InMemoryGateway
from storeit.session import SESSION_COOKIE_NAME

_gateway: BackendGateway | None = None


def get_gateway() -> BackendGateway:
    """
    Return the admin gateway. It holds no per-user state; session-scoped
    gateways are derived from it per request.
    """
    global _gateway
    if _gateway:
        return _gateway

    settings = get_settings()
    if (
        settings.use_in_memory_backends
        or not settings.appwrite_project_id
        or not settings.appwrite_api_key
    ):
        _gateway = InMemoryGateway()
    else:
        _gateway = AppwriteGateway(
            endpoint=settings.appwrite_endpoint,
            project_id=settings.appwrite_project_id,
            database_id=settings.appwrite_database_id,
            bucket_id=settings.appwrite_bucket_id,
            api_key=settings.appwrite_api_key,
        )
    return _gateway


def get_session_secret(request: Request) -> Optional[str]:
    return request.cookies.get(SESSION_COOKIE_NAME)


def get_current_user_optional(
    gateway: BackendGateway = Depends(get_gateway),
    session_secret: Optional[str] = Depends(get_session_secret),
) -> Optional[dict]:
    return get_current_user(gateway, session_secret)


def require_current_user(
    current_user: Optional[dict] = Depends(get_current_user_optional),
) -> dict:
    if not current_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return current_user
