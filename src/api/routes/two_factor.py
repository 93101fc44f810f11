from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.session_cookie import redirect_to_step
from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    SessionContext,
    SetupTwoFactorUseCase,
    TwoFactorEnabledResponse,
    TwoFactorSetupResponse,
    VerifyTwoFactorUseCase,
)
from src.depends import get_current_session, get_two_factor_bucket, get_unit_of_work
from src.domain.entities import AuthStep

router = APIRouter(prefix="/auth/2fa", tags=["Two Factor"])


def _raise_for_setup_error(error):
    if error.code == "SESSION_NOT_TRUSTED":
        raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
    elif error.code in ("TWO_FACTOR_ALREADY_ENABLED", "INVALID_CODE"):
        raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
    raise ServerError(error)


@router.get("/setup", status_code=status.HTTP_200_OK, response_model=TwoFactorSetupResponse)
async def get_two_factor_setup(
    context: SessionContext = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Start TOTP Enrollment

    Returns a new secret and otpauth:// URI for the authenticator app.

    Raises:
        - 401 Unauthorized: No valid session
        - 403 Forbidden: Session not fully trusted
    """
    result = await SetupTwoFactorUseCase(uow, ApplicationConfig.TOTP_ISSUER).prepare(context)
    if result.is_err():
        _raise_for_setup_error(result.error)
    return result.value


class EnableTwoFactorRequest(BaseModel):
    secret: str = Field(..., min_length=16, max_length=64)
    code: str = Field(..., min_length=6, max_length=8)


@router.post("/setup", status_code=status.HTTP_200_OK, response_model=TwoFactorEnabledResponse)
async def enable_two_factor(
    request: EnableTwoFactorRequest,
    context: SessionContext = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Finish TOTP Enrollment

    Raises:
        - 400 Bad Request: Invalid code or already enabled
        - 401 Unauthorized: No valid session
        - 403 Forbidden: Session not fully trusted
    """
    use_case = SetupTwoFactorUseCase(uow, ApplicationConfig.TOTP_ISSUER)
    result = await use_case.execute(context, request.secret, request.code)
    if result.is_err():
        _raise_for_setup_error(result.error)
    return result.value


class VerifyTwoFactorRequest(BaseModel):
    code: str = Field(..., min_length=6, max_length=8)


@router.post("/otp", status_code=status.HTTP_302_FOUND)
async def verify_two_factor(
    request: VerifyTwoFactorRequest,
    context: SessionContext = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    two_factor_bucket: RateLimiter = Depends(get_two_factor_bucket),
):
    """
    Verify TOTP Code

    Raises:
        - 400 Bad Request: Invalid code or 2FA not enabled
        - 401 Unauthorized: No valid session
        - 403 Forbidden: Email not verified yet
        - 429 Too Many Requests: Too many attempts
    """
    if context.next_step == AuthStep.complete:
        return redirect_to_step(context.next_step)

    result = await VerifyTwoFactorUseCase(uow, two_factor_bucket).execute(context, request.code)

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_CODE", "TWO_FACTOR_NOT_ENABLED"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "SESSION_NOT_TRUSTED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        elif error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return redirect_to_step(result.value)
