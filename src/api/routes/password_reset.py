from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.session_cookie import delete_session_cookie, redirect, redirect_to_step
from src.app.services.mailer import IMailer
from src.app.services.password import PasswordStrengthChecker
from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ConfirmPasswordResetUseCase,
    PasswordResetTokenStatus,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    SessionContext,
)
from src.depends import (
    get_mailer,
    get_optional_session,
    get_password_reset_bucket,
    get_password_strength_checker,
    get_unit_of_work,
    password_reset_lifetime_from_config,
)

router = APIRouter(prefix="/auth/password-reset", tags=["Password Reset"])

# Keeps the token in the path out of Referer headers sent to other sites
REFERRER_POLICY = "strict-origin"


class RequestPasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


@router.post("", status_code=status.HTTP_200_OK, response_model=RequestPasswordResetResponse)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    reset_bucket: RateLimiter = Depends(get_password_reset_bucket),
    mailer: IMailer = Depends(get_mailer),
):
    """
    Request Password Reset

    Always answers the same way whether or not the address is registered.

    Raises:
        - 429 Too Many Requests: Reset limit for the address reached
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        reset_bucket,
        mailer,
        reset_url=ApplicationConfig.PASSWORD_RESET_URL,
        token_lifetime=password_reset_lifetime_from_config(),
    )
    result = await use_case.execute(request.email)

    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return result.value


@router.get("/{token}", status_code=status.HTTP_200_OK, response_model=PasswordResetTokenStatus)
async def check_password_reset_token(
    token: str,
    response: Response,
    uow: UnitOfWork = Depends(get_unit_of_work),
    current: Optional[SessionContext] = Depends(get_optional_session),
    strength_checker: PasswordStrengthChecker = Depends(get_password_strength_checker),
):
    """Tell the client whether a reset link can still be used"""
    if current is not None:
        signed_in = redirect_to_step(current.next_step)
        signed_in.headers["Referrer-Policy"] = REFERRER_POLICY
        return signed_in

    response.headers["Referrer-Policy"] = REFERRER_POLICY

    result = await ConfirmPasswordResetUseCase(uow, strength_checker).check_token(token)
    if result.is_err():
        raise ServerError(result.error)
    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    password: str = Field(..., description="New password")


@router.post("/{token}", status_code=status.HTTP_302_FOUND)
async def confirm_password_reset(
    token: str,
    request: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    current: Optional[SessionContext] = Depends(get_optional_session),
    strength_checker: PasswordStrengthChecker = Depends(get_password_strength_checker),
):
    """
    Confirm Password Reset

    Sets the new password, signs the user out everywhere and sends them to
    the login page.

    Raises:
        - 400 Bad Request: Expired/unknown link or weak password
    """
    if current is not None:
        signed_in = redirect_to_step(current.next_step)
        signed_in.headers["Referrer-Policy"] = REFERRER_POLICY
        return signed_in

    use_case = ConfirmPasswordResetUseCase(uow, strength_checker)
    result = await use_case.execute(token, request.password)

    if result.is_err():
        error = result.error
        if error.code in ("TOKEN_NOT_FOUND", "TOKEN_EXPIRED", "WEAK_PASSWORD"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    redirect_response = redirect("/auth/login")
    delete_session_cookie(redirect_response)
    redirect_response.headers["Referrer-Policy"] = REFERRER_POLICY
    return redirect_response
