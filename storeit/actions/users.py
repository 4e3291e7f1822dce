"""
Sign-up, sign-in and session actions.

Every call goes straight to the identity provider. Domain errors are returned
as ``DomainError`` values; provider failures are logged and re-raised as
``InfrastructureError``. ``get_current_user`` is the exception: it is used as
an "is anyone signed in" probe and never raises.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi.responses import RedirectResponse, Response

from storeit.config import get_settings
from storeit.gateway import BackendGateway
from storeit.query import Query
from storeit.results import DomainError, DomainErrorKind, InfrastructureError, Ok, Result
from storeit.session import clear_session_cookie, set_session_cookie
from storeit.utils import generate_password

logger = logging.getLogger(__name__)


def get_user_by_email(admin: BackendGateway, email: str) -> Optional[dict]:
    settings = get_settings()
    result = admin.list_documents(
        settings.appwrite_users_collection_id, [Query.equal("email", [email])]
    )
    return result["documents"][0] if result["total"] > 0 else None


def send_email_otp_for_sign_up(admin: BackendGateway, email: str) -> str:
    """Create a new identity account and email it an OTP. Returns the account id."""
    try:
        account = admin.create_account(email, generate_password())
        admin.create_email_token(email)
        return account["$id"]
    except InfrastructureError:
        logger.exception("Failed to send email OTP for sign up")
        raise


def send_email_otp_for_sign_in(admin: BackendGateway, email: str) -> bool:
    """Email an OTP to an existing identity account."""
    try:
        admin.create_email_token(email)
        return True
    except InfrastructureError:
        logger.exception("Failed to send email OTP for sign in")
        raise


def create_account(admin: BackendGateway, *, full_name: str, email: str) -> Result[str]:
    if get_user_by_email(admin, email):
        logger.info("Sign-up rejected, user record already exists")
        return DomainError.of(DomainErrorKind.USER_ALREADY_EXISTS)

    account_id = send_email_otp_for_sign_up(admin, email)
    if not account_id:
        raise InfrastructureError("Failed to send an OTP")

    settings = get_settings()
    try:
        admin.create_document(
            settings.appwrite_users_collection_id,
            {
                "fullName": full_name,
                "email": email,
                "avatar": settings.avatar_placeholder_url,
                "accountId": account_id,
            },
        )
    except InfrastructureError:
        logger.exception(
            "Failed to create user record, account %s has no record", account_id
        )
        raise
    logger.info("Created user record for account %s", account_id)
    return Ok(account_id)


def sign_in_user(admin: BackendGateway, *, email: str) -> Result[str]:
    try:
        existing_user = get_user_by_email(admin, email)
        if not existing_user:
            return DomainError.of(DomainErrorKind.USER_NOT_FOUND)

        send_email_otp_for_sign_in(admin, email)
        return Ok(existing_user["accountId"])
    except InfrastructureError:
        logger.exception("Failed to sign in user")
        raise


def verify_secret(
    admin: BackendGateway, response: Response, *, account_id: str, password: str
) -> str:
    """
    Exchange an OTP for a session, store its secret in the session cookie and
    return the session id. No cookie is set when the exchange fails.
    """
    try:
        session = admin.create_session(account_id, password)
    except InfrastructureError:
        logger.exception("Failed to verify OTP")
        raise

    set_session_cookie(response, session["secret"], get_settings())
    return session["$id"]


def get_current_user(
    admin: BackendGateway, session_secret: Optional[str]
) -> Optional[dict]:
    if not session_secret:
        return None

    try:
        session = admin.for_session(session_secret)
        account = session.get_account()
        result = session.list_documents(
            get_settings().appwrite_users_collection_id,
            [Query.equal("accountId", [account["$id"]])],
        )
        if result["total"] <= 0:
            return None
        return result["documents"][0]
    except Exception:
        # Callers treat any failure as "nobody is signed in".
        logger.exception("Failed to resolve current user")
        return None


def sign_out_user(
    admin: BackendGateway, session_secret: Optional[str]
) -> RedirectResponse:
    """
    Delete the current session and clear the cookie. Always ends with a
    redirect to the sign-in route, including when the provider call fails.
    """
    settings = get_settings()
    response = RedirectResponse(settings.sign_in_path, status_code=303)
    try:
        if session_secret:
            admin.for_session(session_secret).delete_session("current")
    except InfrastructureError:
        logger.exception("Failed to sign out user")
    finally:
        clear_session_cookie(response, settings)
    return response
