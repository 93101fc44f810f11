from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.routes.auth import client_address
from src.api.utils.session_cookie import redirect_to_step
from src.app.services.passkey_challenge_store import PasskeyChallengeStore
from src.app.services.passkey_verifier import PasskeyVerifier
from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    CreatePasskeyChallengeUseCase,
    PasskeyChallengeResponse,
    PasskeyLoginCommand,
    PasskeyLoginUseCase,
    PasskeyResponse,
    RegisterPasskeyCommand,
    RegisterPasskeyUseCase,
    SessionContext,
)
from src.depends import (
    get_account_login_throttler,
    get_challenge_store,
    get_current_session,
    get_login_throttler,
    get_optional_session,
    get_passkey_verifier,
    get_unit_of_work,
    session_lifetime_from_config,
)

router = APIRouter(prefix="/auth", tags=["Passkeys"])


@router.post(
    "/passkey/challenge",
    status_code=status.HTTP_200_OK,
    response_model=PasskeyChallengeResponse,
)
async def create_challenge(challenges: PasskeyChallengeStore = Depends(get_challenge_store)):
    """Issue a single-use WebAuthn challenge (valid for 5 minutes)"""
    result = await CreatePasskeyChallengeUseCase(challenges).execute()
    return result.value


class PasskeyLoginRequest(BaseModel):
    """navigator.credentials.get() response, binary fields base64url encoded"""

    username_or_email: str = Field(..., min_length=1, max_length=255)
    credential_id: str = Field(..., min_length=1)
    challenge: str = Field(..., min_length=1)
    client_data_json: str = Field(..., min_length=1)
    authenticator_data: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


@router.post("/login/passkey", status_code=status.HTTP_302_FOUND)
async def login_with_passkey(
    request: PasskeyLoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    current: Optional[SessionContext] = Depends(get_optional_session),
    throttler: RateLimiter = Depends(get_login_throttler),
    account_throttler: RateLimiter = Depends(get_account_login_throttler),
    challenges: PasskeyChallengeStore = Depends(get_challenge_store),
    verifier: PasskeyVerifier = Depends(get_passkey_verifier),
):
    """
    Passkey Login

    Raises:
        - 400 Bad Request: Invalid passkey or unknown/used challenge
        - 429 Too Many Requests: Throttled after repeated failures
    """
    if current is not None:
        return redirect_to_step(current.next_step)

    use_case = PasskeyLoginUseCase(
        uow,
        throttler,
        account_throttler,
        challenges,
        verifier,
        session_lifetime=session_lifetime_from_config(),
    )
    result = await use_case.execute(
        PasskeyLoginCommand(**request.model_dump()), client_address(http_request)
    )

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_PASSKEY", "CHALLENGE_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return redirect_to_step(result.value.next_step, result.value.session_token)


class RegisterPasskeyRequest(BaseModel):
    """navigator.credentials.create() response plus the key from getPublicKey()"""

    credential_id: str = Field(..., min_length=1, max_length=1024)
    name: str = Field(default="Passkey", min_length=1, max_length=255)
    public_key: str = Field(..., min_length=1)
    algorithm: int
    challenge: str = Field(..., min_length=1)
    client_data_json: str = Field(..., min_length=1)
    authenticator_data: str = Field(..., min_length=1)


@router.post("/passkeys", status_code=status.HTTP_201_CREATED, response_model=PasskeyResponse)
async def register_passkey(
    request: RegisterPasskeyRequest,
    context: SessionContext = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    challenges: PasskeyChallengeStore = Depends(get_challenge_store),
    verifier: PasskeyVerifier = Depends(get_passkey_verifier),
):
    """
    Register Passkey

    Raises:
        - 400 Bad Request: Invalid passkey or unknown/used challenge
        - 401 Unauthorized: No valid session
        - 403 Forbidden: Session not fully trusted
    """
    use_case = RegisterPasskeyUseCase(uow, challenges, verifier)
    result = await use_case.execute(context, RegisterPasskeyCommand(**request.model_dump()))

    if result.is_err():
        error = result.error
        if error.code in ("INVALID_PASSKEY", "CHALLENGE_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "SESSION_NOT_TRUSTED":
            raise ClientError(error, status_code=status.HTTP_403_FORBIDDEN)
        raise ServerError(error)

    return result.value
