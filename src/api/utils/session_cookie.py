"""
Session cookie helpers.

Browsers carry the session token in an HTTP-only cookie; other clients
may send it as `Authorization: Bearer <token>` instead.
"""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import RedirectResponse

from config import ApplicationConfig
from src.domain.entities import AuthStep

STEP_PATHS = {
    AuthStep.email_verification: "/auth/email-verification",
    AuthStep.two_factor: "/auth/2fa/otp",
    AuthStep.complete: "/",
}


def read_session_token(request: Request) -> Optional[str]:
    token = request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def set_session_cookie(response, token: str) -> None:
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=token,
        max_age=ApplicationConfig.SESSION_EXPIRES_DAYS * 24 * 60 * 60,
        path="/",
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def delete_session_cookie(response) -> None:
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def redirect(path: str) -> RedirectResponse:
    return RedirectResponse(url=path, status_code=status.HTTP_302_FOUND)


def redirect_to_step(step: AuthStep, session_token: Optional[str] = None) -> RedirectResponse:
    """302 to where the client should continue; sets the cookie when a new session was issued"""
    response = redirect(STEP_PATHS[step])
    if session_token:
        set_session_cookie(response, session_token)
    return response
