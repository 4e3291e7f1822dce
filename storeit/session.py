"""
Session cookie handling.
"""

from __future__ import annotations

from fastapi.responses import Response

from storeit.config import Settings

SESSION_COOKIE_NAME = "appwrite-session"


def set_session_cookie(response: Response, secret: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        secret,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
    )
