"""
Setup Two Factor Use Case

Enrolls a TOTP authenticator for the signed-in user.
"""

import logging
from uuid import UUID

import pyotp

from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthStep, TwoFactorCredential
from src.libs.result import Error, Result, Return
from .dtos import SessionContext, TwoFactorEnabledResponse, TwoFactorSetupResponse

logger = logging.getLogger(__name__)


class SetupTwoFactorUseCase:
    """
    Use case for TOTP enrollment.

    Business Rules:
    - Only a fully trusted session may enroll
    - A user has at most one TOTP credential
    - The secret is stored only after the user proves it with a valid code
    - Enrolling marks the current session as two-factor verified
    """

    def __init__(self, uow: UnitOfWork, issuer: str = "Auth Core"):
        self.uow = uow
        self.issuer = issuer

    def _check_allowed(self, context: SessionContext):
        if context.next_step != AuthStep.complete:
            return Error("SESSION_NOT_TRUSTED", "Finish signing in first")
        if context.has_two_factor:
            return Error("TWO_FACTOR_ALREADY_ENABLED", "Two-factor authentication is already enabled")
        return None

    async def prepare(self, context: SessionContext) -> Result[TwoFactorSetupResponse]:
        """Offer a new secret and its otpauth:// URI; nothing is stored"""
        error = self._check_allowed(context)
        if error:
            return Return.err(error)

        secret = pyotp.random_base32()
        uri = pyotp.TOTP(secret).provisioning_uri(name=context.username, issuer_name=self.issuer)
        return Return.ok(TwoFactorSetupResponse(secret=secret, uri=uri))

    async def execute(
        self, context: SessionContext, secret: str, code: str
    ) -> Result[TwoFactorEnabledResponse]:
        error = self._check_allowed(context)
        if error:
            return Return.err(error)

        try:
            valid = pyotp.TOTP(secret).verify(code.strip(), valid_window=1)
        except (ValueError, TypeError):
            valid = False
        if not valid:
            return Return.err(Error("INVALID_CODE", "Invalid code"))

        async with self.uow:
            await self.uow.two_factor_credentials.create(
                TwoFactorCredential(user_id=UUID(context.user_id), secret=secret)
            )
            await self.uow.sessions.mark_two_factor_verified(context.session_id)
            await self.uow.commit()

        logger.info(f"Two-factor authentication enabled for user {context.user_id}")
        return Return.ok(
            TwoFactorEnabledResponse(status="enabled", message="Two-factor authentication enabled")
        )
