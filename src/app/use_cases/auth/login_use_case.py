"""
Login Use Case

Handles password authentication and session creation.
"""

import asyncio
import logging
from datetime import timedelta

from src.app.services.password import verify_dummy_password, verify_password
from src.app.services.rate_limiter import RateLimiter
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import AuthenticatedSession
from .helpers import find_user, resolve_next_step

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid username, email or password")
RATE_LIMITED = Error("RATE_LIMITED", "Too many attempts. Try again later.")


class LoginUseCase:
    """
    Use case for password login.

    Business Rules:
    - Login by username or email, both case-insensitive
    - Unknown users still pay for a password verification (timing parity)
    - Failures are throttled per (user, client address) and per user
    - The password is only verified when both throttlers allow the attempt
    - Success forgives both throttlers and opens a session with no
      second factor verified
    """

    def __init__(
        self,
        uow: UnitOfWork,
        throttler: RateLimiter,
        account_throttler: RateLimiter,
        session_lifetime: timedelta = timedelta(days=30),
    ):
        self.uow = uow
        self.throttler = throttler
        self.account_throttler = account_throttler
        self.session_lifetime = session_lifetime

    async def execute(
        self, username_or_email: str, password: str, client_address: str
    ) -> Result[AuthenticatedSession]:
        """
        Execute login use case.

        Args:
            username_or_email: Username or email address
            password: Plain text password
            client_address: Address of the requesting client

        Returns:
            Result with AuthenticatedSession, or Error
            (INVALID_CREDENTIALS | RATE_LIMITED)
        """
        async with self.uow:
            user = await find_user(self.uow, username_or_email)

            if user is None or user.password_hash is None:
                verify_dummy_password(password)
                return Return.err(INVALID_CREDENTIALS)

            pair_key = f"{user.id}:{client_address}"
            account_key = str(user.id)

            pair_allowed, account_allowed = await asyncio.gather(
                self.throttler.check(pair_key),
                self.account_throttler.check(account_key),
            )
            if not (pair_allowed and account_allowed):
                logger.warning(f"Login throttled for user {user.id}")
                return Return.err(RATE_LIMITED)

            if not verify_password(user.password_hash, password):
                await asyncio.gather(
                    self.throttler.increment(pair_key),
                    self.account_throttler.increment(account_key),
                )
                logger.info(f"Failed login for user {user.id}")
                return Return.err(INVALID_CREDENTIALS)

            await asyncio.gather(
                self.throttler.reset(pair_key),
                self.account_throttler.reset(account_key),
            )

            sessions = SessionService(self.uow.sessions, self.session_lifetime)
            token, session = await sessions.create_session(user.id)
            next_step = await resolve_next_step(self.uow, session)

            await self.uow.commit()

        return Return.ok(AuthenticatedSession(session_token=token, next_step=next_step))
