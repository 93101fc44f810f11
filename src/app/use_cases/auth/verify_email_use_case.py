"""
Verify Email Use Case

Handles email verification via the emailed code.
"""

import asyncio
import logging
from datetime import timedelta
from uuid import UUID

from src.app.services.rate_limiter import RateLimiter
from src.app.services.secret_tokens import codes_match, is_within_expiration_date
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import AuthenticatedSession, SessionContext
from .helpers import resolve_next_step

logger = logging.getLogger(__name__)


class VerifyEmailUseCase:
    """
    Use case for email verification.

    Business Rules:
    - Attempts are limited per user by the verification bucket
    - Code must match the one stored for the user's address
    - An expired code is rejected even when it matches
    - Success, in one commit: code deleted, email marked verified, every
      session of the user deleted and one new session created (second
      factor unverified, passkey flag carried over)
    - Both the verification and the resend buckets are reset afterwards
    """

    def __init__(
        self,
        uow: UnitOfWork,
        verification_bucket: RateLimiter,
        resend_bucket: RateLimiter,
        session_lifetime: timedelta = timedelta(days=30),
    ):
        self.uow = uow
        self.verification_bucket = verification_bucket
        self.resend_bucket = resend_bucket
        self.session_lifetime = session_lifetime

    async def execute(self, context: SessionContext, code: str) -> Result[AuthenticatedSession]:
        """
        Errors:
            - EMAIL_ALREADY_VERIFIED: Nothing to verify
            - RATE_LIMITED: Verification bucket is empty
            - TOKEN_NOT_FOUND: No code outstanding for the address
            - TOKEN_EXPIRED: Code has expired, request a new one
            - INVALID_CODE: Code does not match
        """
        if context.email_verified:
            return Return.err(Error("EMAIL_ALREADY_VERIFIED", "Email is already verified"))

        if not await self.verification_bucket.check(context.user_id):
            return Return.err(Error("RATE_LIMITED", "Too many attempts. Try again later."))

        async with self.uow:
            verification = await self.uow.email_verifications.get_by_email(context.email)
            if verification is None:
                return Return.err(
                    Error("TOKEN_NOT_FOUND", "No verification code found. Request a new one.")
                )

            if not is_within_expiration_date(verification.expires_at):
                return Return.err(
                    Error("TOKEN_EXPIRED", "Verification code has expired. Request a new one.")
                )

            if not codes_match(verification.code, code):
                logger.info(f"Invalid verification code for user {context.user_id}")
                return Return.err(Error("INVALID_CODE", "Invalid code"))

            if not await self.uow.email_verifications.delete_by_email(context.email):
                return Return.err(
                    Error("TOKEN_NOT_FOUND", "No verification code found. Request a new one.")
                )
            await self.uow.emails.mark_verified(context.email)

            sessions = SessionService(self.uow.sessions, self.session_lifetime)
            user_id = UUID(context.user_id)
            await sessions.invalidate_user_sessions(user_id)
            token, session = await sessions.create_session(
                user_id,
                is_two_factor_verified=False,
                is_passkey_verified=context.is_passkey_verified,
            )
            next_step = await resolve_next_step(self.uow, session)

            await self.uow.commit()

        await asyncio.gather(
            self.verification_bucket.reset(context.user_id),
            self.resend_bucket.reset(context.user_id),
        )
        logger.info(f"Email verified for user {context.user_id}")

        return Return.ok(AuthenticatedSession(session_token=token, next_step=next_step))
