from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.api.utils.session_cookie import delete_session_cookie, redirect, redirect_to_step
from src.app.services.mailer import IMailer
from src.app.services.password import PasswordStrengthChecker
from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    LoginUseCase,
    LogoutUseCase,
    SessionContext,
    SignupCommand,
    SignupUseCase,
)
from src.depends import (
    email_code_lifetime_from_config,
    get_account_login_throttler,
    get_current_session,
    get_login_throttler,
    get_mailer,
    get_optional_session,
    get_password_strength_checker,
    get_unit_of_work,
    session_lifetime_from_config,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Validates incoming HTTP request before converting to SignupCommand.
    Password strength is a business rule checked by the use case.
    """

    username: str = Field(
        ..., min_length=3, max_length=31, pattern=r"^[A-Za-z0-9_-]+$", description="Username"
    )
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


@router.post("/signup", status_code=status.HTTP_302_FOUND)
async def signup(
    request: SignupRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    strength_checker: PasswordStrengthChecker = Depends(get_password_strength_checker),
    mailer: IMailer = Depends(get_mailer),
):
    """
    User Signup

    Creates the account, emails a verification code and signs the user in.
    Redirects to the email verification step with the session cookie set.

    Raises:
        - 400 Bad Request: Weak password, username or email taken
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 503 Service Unavailable: Breach check unreachable
    """
    command = SignupCommand(
        username=request.username, email=request.email, password=request.password
    )

    use_case = SignupUseCase(
        uow,
        strength_checker,
        mailer,
        code_length=ApplicationConfig.EMAIL_VERIFICATION_CODE_LENGTH,
        code_lifetime=email_code_lifetime_from_config(),
        session_lifetime=session_lifetime_from_config(),
    )
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code in ("WEAK_PASSWORD", "USERNAME_TAKEN", "EMAIL_TAKEN"):
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return redirect_to_step(result.value.next_step, result.value.session_token)


class LoginRequest(BaseModel):
    """
    Login HTTP request payload

    Validates incoming login request.
    """

    username_or_email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


@router.post("/login", status_code=status.HTTP_302_FOUND)
async def login(
    request: LoginRequest,
    http_request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    current: Optional[SessionContext] = Depends(get_optional_session),
    throttler: RateLimiter = Depends(get_login_throttler),
    account_throttler: RateLimiter = Depends(get_account_login_throttler),
):
    """
    User Login

    Authenticates with username or email and password, then redirects to
    the next authentication step with a new session cookie.

    Raises:
        - 400 Bad Request: Invalid credentials
        - 429 Too Many Requests: Throttled after repeated failures
    """
    if current is not None:
        return redirect_to_step(current.next_step)

    use_case = LoginUseCase(
        uow, throttler, account_throttler, session_lifetime=session_lifetime_from_config()
    )
    result = await use_case.execute(
        request.username_or_email, request.password, client_address(http_request)
    )

    if result.is_err():
        error = result.error
        if error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "RATE_LIMITED":
            raise ClientError(error, status_code=status.HTTP_429_TOO_MANY_REQUESTS)
        raise ServerError(error)

    return redirect_to_step(result.value.next_step, result.value.session_token)


@router.post("/logout", status_code=status.HTTP_302_FOUND)
async def logout(
    context: SessionContext = Depends(get_current_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Logout

    Deletes the current session and blanks the cookie.

    Raises:
        - 401 Unauthorized: No valid session
    """
    result = await LogoutUseCase(uow).execute(context)
    if result.is_err():
        raise ServerError(result.error)

    response = redirect("/")
    delete_session_cookie(response)
    return response


@router.get("/session", status_code=status.HTTP_200_OK, response_model=SessionContext)
async def current_session(context: SessionContext = Depends(get_current_session)):
    """
    Current Session

    Returns the session state, including which authentication step is next.

    Raises:
        - 401 Unauthorized: No valid session
    """
    return context
