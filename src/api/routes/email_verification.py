from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.session_cookie import redirect, redirect_to_step
from src.app.services.mailer import IMailer
from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ResendVerificationResponse,
    ResendVerificationUseCase,
    SessionContext,
    VerifyEmailUseCase,
)
from src.depends import (
    email_code_lifetime_from_config,
    get_email_resend_bucket,
    get_email_verification_bucket,
    get_mailer,
    get_optional_session,
    get_unit_of_work,
    session_lifetime_from_config,
)

router = APIRouter(prefix="/auth/email-verification", tags=["Email Verification"])


class VerifyEmailRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=32)


@router.post("", status_code=status.HTTP_302_FOUND)
async def verify_email(
    request: VerifyEmailRequest,
    context: Optional[SessionContext] = Depends(get_optional_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    verification_bucket: RateLimiter = Depends(get_email_verification_bucket),
    resend_bucket: RateLimiter = Depends(get_email_resend_bucket),
):
    """
    Verify Email

    Checks the emailed code. On success every other session of the user is
    signed out and a fresh session cookie is issued.

    Raises:
        - 400 Bad Request: Invalid, missing or expired code
        - 429 Too Many Requests: Too many attempts
    """
    if context is None:
        return redirect("/auth/login")
    if context.email_verified:
        return redirect_to_step(context.next_step)

    use_case = VerifyEmailUseCase(
        uow,
        verification_bucket,
        resend_bucket,
        session_lifetime=session_lifetime_from_config(),
    )
    result = await use_case.execute(context, request.code)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_CODE", "TOKEN_NOT_FOUND", "TOKEN_EXPIRED"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        elif error.code == "EMAIL_ALREADY_VERIFIED":
            return redirect("/")
        raise ServerError(error)

    return redirect_to_step(result.value.next_step, result.value.session_token)


@router.post("/resend", status_code=status.HTTP_200_OK, response_model=ResendVerificationResponse)
async def resend_verification(
    context: Optional[SessionContext] = Depends(get_optional_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    resend_bucket: RateLimiter = Depends(get_email_resend_bucket),
    mailer: IMailer = Depends(get_mailer),
):
    """
    Resend Verification Code

    Raises:
        - 429 Too Many Requests: Resend limit reached
    """
    if context is None:
        return redirect("/auth/login")
    if context.email_verified:
        return redirect_to_step(context.next_step)

    use_case = ResendVerificationUseCase(
        uow,
        resend_bucket,
        mailer,
        code_length=ApplicationConfig.EMAIL_VERIFICATION_CODE_LENGTH,
        code_lifetime=email_code_lifetime_from_config(),
    )
    result = await use_case.execute(context)

    if result.is_err():
        error = result.error
        if error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        elif error.code == "EMAIL_ALREADY_VERIFIED":
            return redirect("/")
        raise ServerError(error)

    return result.value
