"""
Confirm Password Reset Use Case

Handles checking a reset link and setting the new password.
"""

import asyncio
import logging

from src.app.services.password import PasswordStrengthChecker, hash_password
from src.app.services.secret_tokens import hash_token, is_within_expiration_date
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import ConfirmPasswordResetResponse, PasswordResetTokenStatus

logger = logging.getLogger(__name__)

LINK_EXPIRED = "Password reset link has expired"


class ConfirmPasswordResetUseCase:
    """
    Use case for confirming password reset.

    Business Rules:
    - Missing and expired tokens get the same message
    - New password must pass the strength check
    - In one commit: reset deleted, password hash replaced, every session
      of the user deleted
    - Token is single use
    """

    def __init__(self, uow: UnitOfWork, strength_checker: PasswordStrengthChecker):
        self.uow = uow
        self.strength_checker = strength_checker

    async def check_token(self, token: str) -> Result[PasswordResetTokenStatus]:
        """Pre-check a reset link; an expired record is deleted"""
        async with self.uow:
            reset = await self.uow.password_resets.get_by_token_hash(hash_token(token))
            if reset is None:
                return Return.ok(PasswordResetTokenStatus(valid=False, message=LINK_EXPIRED))

            if not is_within_expiration_date(reset.expires_at):
                await self.uow.password_resets.delete_by_token_hash(reset.token_hash)
                await self.uow.commit()
                return Return.ok(PasswordResetTokenStatus(valid=False, message=LINK_EXPIRED))

        return Return.ok(PasswordResetTokenStatus(valid=True, message=""))

    async def execute(self, token: str, new_password: str) -> Result[ConfirmPasswordResetResponse]:
        """
        Errors:
            - TOKEN_NOT_FOUND: Unknown or already used token
            - TOKEN_EXPIRED: Token past its expiry
            - WEAK_PASSWORD: New password rejected by the strength check
        """
        token_hash = hash_token(token)

        async with self.uow:
            reset, strong = await asyncio.gather(
                self.uow.password_resets.get_by_token_hash(token_hash),
                self.strength_checker.is_strong(new_password),
            )

            if reset is None:
                return Return.err(Error("TOKEN_NOT_FOUND", LINK_EXPIRED))
            if not is_within_expiration_date(reset.expires_at):
                return Return.err(Error("TOKEN_EXPIRED", LINK_EXPIRED))
            if not strong:
                return Return.err(
                    Error("WEAK_PASSWORD", "Password is too weak or has been compromised")
                )

            # A concurrent confirmation may have consumed the token since the read
            if not await self.uow.password_resets.delete_by_token_hash(token_hash):
                return Return.err(Error("TOKEN_NOT_FOUND", LINK_EXPIRED))
            await self.uow.users.update_password_hash(reset.user_id, hash_password(new_password))
            await SessionService(self.uow.sessions).invalidate_user_sessions(reset.user_id)

            await self.uow.commit()

        logger.info(f"Password reset completed for user {reset.user_id}")
        return Return.ok(
            ConfirmPasswordResetResponse(status="reset", message="Password has been reset")
        )
