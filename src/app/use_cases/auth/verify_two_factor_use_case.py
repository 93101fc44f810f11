"""
Verify Two Factor Use Case

Completes sign-in with a TOTP code.
"""

import logging
from uuid import UUID

import pyotp

from src.app.services.rate_limiter import RateLimiter
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthStep
from src.libs.result import Error, Result, Return
from .dtos import SessionContext

logger = logging.getLogger(__name__)


class VerifyTwoFactorUseCase:
    """
    Use case for the second factor.

    Business Rules:
    - Email must be verified first
    - Attempts are limited per user by the two-factor bucket
    - A valid code sets the flag on the current session only
    """

    def __init__(self, uow: UnitOfWork, two_factor_bucket: RateLimiter):
        self.uow = uow
        self.two_factor_bucket = two_factor_bucket

    async def execute(self, context: SessionContext, code: str) -> Result[AuthStep]:
        if not context.email_verified:
            return Return.err(Error("SESSION_NOT_TRUSTED", "Verify your email first"))
        if not context.has_two_factor:
            return Return.err(
                Error("TWO_FACTOR_NOT_ENABLED", "Two-factor authentication is not enabled")
            )

        if not await self.two_factor_bucket.check(context.user_id):
            return Return.err(Error("RATE_LIMITED", "Too many attempts. Try again later."))

        async with self.uow:
            credential = await self.uow.two_factor_credentials.get_by_user_id(UUID(context.user_id))
            if credential is None:
                return Return.err(
                    Error("TWO_FACTOR_NOT_ENABLED", "Two-factor authentication is not enabled")
                )

            if not pyotp.TOTP(credential.secret).verify(code.strip(), valid_window=1):
                logger.info(f"Invalid two-factor code for user {context.user_id}")
                return Return.err(Error("INVALID_CODE", "Invalid code"))

            await self.uow.sessions.mark_two_factor_verified(context.session_id)
            await self.uow.commit()

        await self.two_factor_bucket.reset(context.user_id)
        return Return.ok(AuthStep.complete)
