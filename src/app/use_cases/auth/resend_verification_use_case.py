"""
Resend Verification Use Case

Issues a new email verification code, replacing the outstanding one.
"""

import logging
from datetime import timedelta

from src.app.services.mailer import IMailer
from src.app.services.rate_limiter import RateLimiter
from src.app.services.secret_tokens import generate_email_verification_code
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import EmailVerification
from src.libs.result import Error, Result, Return
from .dtos import ResendVerificationResponse, SessionContext

logger = logging.getLogger(__name__)


class ResendVerificationUseCase:
    """
    Use case for resending the verification code.

    Business Rules:
    - Limited per user by the resend bucket
    - The previous code for the address stops working
    - Codes for other addresses are untouched
    """

    def __init__(
        self,
        uow: UnitOfWork,
        resend_bucket: RateLimiter,
        mailer: IMailer,
        code_length: int = 8,
        code_lifetime: timedelta = timedelta(minutes=15),
    ):
        self.uow = uow
        self.resend_bucket = resend_bucket
        self.mailer = mailer
        self.code_length = code_length
        self.code_lifetime = code_lifetime

    async def execute(self, context: SessionContext) -> Result[ResendVerificationResponse]:
        if context.email_verified:
            return Return.err(Error("EMAIL_ALREADY_VERIFIED", "Email is already verified"))

        if not await self.resend_bucket.check(context.user_id):
            return Return.err(Error("RATE_LIMITED", "Too many requests. Try again later."))

        code = generate_email_verification_code(self.code_length)
        async with self.uow:
            await self.uow.email_verifications.replace(
                EmailVerification(
                    email=context.email,
                    code=code,
                    expires_at=utc_now() + self.code_lifetime,
                )
            )
            await self.uow.commit()

        await self.mailer.send_verification_code(context.email, code)

        return Return.ok(
            ResendVerificationResponse(status="sent", message="A new verification code has been sent")
        )
