"""
Request Password Reset Use Case

Handles generating and sending password reset tokens.
"""

import logging
from datetime import timedelta

from src.app.services.mailer import IMailer
from src.app.services.rate_limiter import RateLimiter
from src.app.services.secret_tokens import generate_password_reset_token, hash_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import PasswordReset
from src.libs.result import Error, Result, Return
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

RESET_REQUESTED = RequestPasswordResetResponse(
    status="sent",
    message="If the email exists, a password reset link has been sent",
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Limited per email address by the reset bucket
    - Only verified addresses receive a link
    - Token is 25 random bytes (40 base32 characters); only its SHA-256
      hash is stored
    - Existing resets of the user are replaced in the same transaction
    - Token expires in 2 hours
    - No email enumeration (same response for known and unknown addresses)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        reset_bucket: RateLimiter,
        mailer: IMailer,
        reset_url: str,
        token_lifetime: timedelta = timedelta(hours=2),
    ):
        self.uow = uow
        self.reset_bucket = reset_bucket
        self.mailer = mailer
        self.reset_url = reset_url
        self.token_lifetime = token_lifetime

    async def execute(self, email: str) -> Result[RequestPasswordResetResponse]:
        email = email.strip().lower()

        if not await self.reset_bucket.check(email):
            return Return.err(Error("RATE_LIMITED", "Too many requests. Try again later."))

        async with self.uow:
            record = await self.uow.emails.get(email)
            if record is None or not record.is_verified:
                return Return.ok(RESET_REQUESTED)

            token = generate_password_reset_token()
            await self.uow.password_resets.replace_for_user(
                PasswordReset(
                    token_hash=hash_token(token),
                    user_id=record.user_id,
                    expires_at=utc_now() + self.token_lifetime,
                )
            )
            await self.uow.commit()

        logger.info(f"Password reset requested for user {record.user_id}")
        await self.mailer.send_password_reset_link(email, self.reset_url.format(token=token))

        return Return.ok(RESET_REQUESTED)
