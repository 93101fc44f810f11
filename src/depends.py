from datetime import timedelta
from typing import Optional

import httpx
from fastapi import Depends, Request, status
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.rate_limit.throttler import Throttler
from src.adapter.rate_limit.token_bucket import (
    ConstantRefillTokenBucketLimiter,
    FixedRefillTokenBucketLimiter,
)
from src.adapter.services.logging_mailer import LoggingMailer
from src.adapter.services.pwned_password_checker import PwnedPasswordChecker
from src.adapter.services.redis_challenge_store import RedisPasskeyChallengeStore
from src.adapter.services.redis_store import create_redis_client
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.utils.session_cookie import read_session_token
from src.app.services.passkey_verifier import PasskeyVerifier
from src.app.use_cases.auth import SessionContext, ValidateSessionUseCase
from src.domain.entities import ThrottleResetType
from src.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)


def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if engine.dialect.name == "sqlite":
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

async def init_db() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


_redis = None
_http_client: Optional[httpx.AsyncClient] = None


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_redis():
    """Process-wide counter store client, created on first use"""
    global _redis
    if _redis is None:
        _redis = create_redis_client(ApplicationConfig.REDIS_URL, ApplicationConfig.REDIS_CLUSTER)
    return _redis


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=ApplicationConfig.PWNED_PASSWORDS_TIMEOUT_SECONDS)
    return _http_client


async def close_clients() -> None:
    global _redis, _http_client
    if _redis is not None:
        await _redis.aclose()
        _redis = None
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


# ============================================================================
# Limiters (stateless objects; all state lives in Redis)
# ============================================================================


def get_login_throttler(redis=Depends(get_redis)) -> Throttler:
    return Throttler(
        name="login-throttle",
        storage=redis,
        timeout_seconds=ApplicationConfig.LOGIN_THROTTLE_TIMEOUT_SECONDS,
        grace=ApplicationConfig.LOGIN_THROTTLE_GRACE,
        cutoff_seconds=ApplicationConfig.LOGIN_THROTTLE_CUTOFF_SECONDS,
        reset_type=ThrottleResetType.instant,
    )


def get_account_login_throttler(redis=Depends(get_redis)) -> Throttler:
    return Throttler(
        name="login-account-throttle",
        storage=redis,
        timeout_seconds=ApplicationConfig.LOGIN_THROTTLE_TIMEOUT_SECONDS,
        grace=ApplicationConfig.LOGIN_ACCOUNT_THROTTLE_GRACE,
        cutoff_seconds=ApplicationConfig.LOGIN_THROTTLE_CUTOFF_SECONDS,
        reset_type=ThrottleResetType.instant,
    )


def get_email_verification_bucket(redis=Depends(get_redis)) -> FixedRefillTokenBucketLimiter:
    return FixedRefillTokenBucketLimiter(
        name="email-verification",
        storage=redis,
        max=ApplicationConfig.EMAIL_VERIFICATION_BUCKET_MAX,
        refill_interval_seconds=ApplicationConfig.EMAIL_VERIFICATION_BUCKET_INTERVAL_SECONDS,
    )


def get_email_resend_bucket(redis=Depends(get_redis)) -> ConstantRefillTokenBucketLimiter:
    return ConstantRefillTokenBucketLimiter(
        name="email-resend",
        storage=redis,
        max=ApplicationConfig.EMAIL_RESEND_BUCKET_MAX,
        refill_interval_seconds=ApplicationConfig.EMAIL_RESEND_BUCKET_INTERVAL_SECONDS,
    )


def get_password_reset_bucket(redis=Depends(get_redis)) -> FixedRefillTokenBucketLimiter:
    return FixedRefillTokenBucketLimiter(
        name="password-reset",
        storage=redis,
        max=ApplicationConfig.PASSWORD_RESET_BUCKET_MAX,
        refill_interval_seconds=ApplicationConfig.PASSWORD_RESET_BUCKET_INTERVAL_SECONDS,
    )


def get_two_factor_bucket(redis=Depends(get_redis)) -> ConstantRefillTokenBucketLimiter:
    return ConstantRefillTokenBucketLimiter(
        name="two-factor",
        storage=redis,
        max=ApplicationConfig.TWO_FACTOR_BUCKET_MAX,
        refill_interval_seconds=ApplicationConfig.TWO_FACTOR_BUCKET_INTERVAL_SECONDS,
    )


# ============================================================================
# Services
# ============================================================================


def get_mailer() -> LoggingMailer:
    return LoggingMailer()


def get_password_strength_checker() -> PwnedPasswordChecker:
    return PwnedPasswordChecker(
        client=get_http_client(),
        base_url=ApplicationConfig.PWNED_PASSWORDS_URL,
        enabled=ApplicationConfig.PASSWORD_BREACH_CHECK_ENABLED,
    )


def get_passkey_verifier() -> PasskeyVerifier:
    return PasskeyVerifier(ApplicationConfig.WEBAUTHN_RP_ID, ApplicationConfig.WEBAUTHN_ORIGINS)


def get_challenge_store(redis=Depends(get_redis)) -> RedisPasskeyChallengeStore:
    return RedisPasskeyChallengeStore(
        storage=redis, expires_seconds=ApplicationConfig.PASSKEY_CHALLENGE_EXPIRES_SECONDS
    )


# ============================================================================
# Sessions
# ============================================================================


async def get_optional_session(
    request: Request, uow=Depends(get_unit_of_work)
) -> Optional[SessionContext]:
    """Session presented by the request (cookie, then Bearer token), if still valid"""
    token = read_session_token(request)
    if not token:
        return None

    use_case = ValidateSessionUseCase(uow, session_lifetime_from_config())
    result = await use_case.execute(token)
    if result.is_err():
        return None
    return result.value


async def get_current_session(
    context: Optional[SessionContext] = Depends(get_optional_session),
) -> SessionContext:
    """
    Dependency requiring a valid session.

    Raises:
        ClientError: 401 UNAUTHENTICATED when no valid session is presented
    """
    if context is None:
        raise ClientError(
            Error("UNAUTHENTICATED", "Not signed in"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return context


def session_lifetime_from_config() -> timedelta:
    return timedelta(days=ApplicationConfig.SESSION_EXPIRES_DAYS)


def email_code_lifetime_from_config() -> timedelta:
    return timedelta(minutes=ApplicationConfig.EMAIL_VERIFICATION_EXPIRES_MINUTES)


def password_reset_lifetime_from_config() -> timedelta:
    return timedelta(hours=ApplicationConfig.PASSWORD_RESET_EXPIRES_HOURS)
