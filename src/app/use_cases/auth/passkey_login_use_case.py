"""
Passkey Login Use Case

Authenticates with a WebAuthn assertion instead of a password.
"""

import asyncio
import logging
from datetime import timedelta

from src.app.services.passkey_challenge_store import PasskeyChallengeStore
from src.app.services.passkey_verifier import PasskeyVerifier, b64url_decode, parse_sign_count
from src.app.services.rate_limiter import RateLimiter
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import AuthenticatedSession, PasskeyLoginCommand
from .helpers import find_user, resolve_next_step

logger = logging.getLogger(__name__)

INVALID_PASSKEY = Error("INVALID_PASSKEY", "Invalid passkey")


class PasskeyLoginUseCase:
    """
    Use case for passkey login.

    Business Rules:
    - Shares the login throttlers with password login
    - The challenge is single use, consumed before verification
    - The credential must belong to the named user
    - Signature counter is stored after every successful assertion
    - The new session is passkey-verified, which also satisfies 2FA
    """

    def __init__(
        self,
        uow: UnitOfWork,
        throttler: RateLimiter,
        account_throttler: RateLimiter,
        challenges: PasskeyChallengeStore,
        verifier: PasskeyVerifier,
        session_lifetime: timedelta = timedelta(days=30),
    ):
        self.uow = uow
        self.throttler = throttler
        self.account_throttler = account_throttler
        self.challenges = challenges
        self.verifier = verifier
        self.session_lifetime = session_lifetime

    async def execute(
        self, command: PasskeyLoginCommand, client_address: str
    ) -> Result[AuthenticatedSession]:
        async with self.uow:
            user = await find_user(self.uow, command.username_or_email)
            if user is None:
                return Return.err(INVALID_PASSKEY)

            pair_key = f"{user.id}:{client_address}"
            account_key = str(user.id)

            pair_allowed, account_allowed = await asyncio.gather(
                self.throttler.check(pair_key),
                self.account_throttler.check(account_key),
            )
            if not (pair_allowed and account_allowed):
                logger.warning(f"Passkey login throttled for user {user.id}")
                return Return.err(Error("RATE_LIMITED", "Too many attempts. Try again later."))

            if await self.challenges.consume(command.challenge) is None:
                return Return.err(
                    Error("CHALLENGE_NOT_FOUND", "Challenge has expired or was already used")
                )

            passkey = await self.uow.passkeys.get_for_user(command.credential_id, user.id)
            valid = passkey is not None and self.verifier.verify_assertion(
                public_key=passkey.public_key,
                algorithm=passkey.algorithm,
                stored_sign_count=passkey.sign_count,
                challenge=command.challenge,
                client_data_json=command.client_data_json,
                authenticator_data=command.authenticator_data,
                signature=command.signature,
            )
            if not valid:
                await asyncio.gather(
                    self.throttler.increment(pair_key),
                    self.account_throttler.increment(account_key),
                )
                logger.info(f"Failed passkey login for user {user.id}")
                return Return.err(INVALID_PASSKEY)

            await self.uow.passkeys.update_sign_count(
                passkey.id, parse_sign_count(b64url_decode(command.authenticator_data))
            )
            await asyncio.gather(
                self.throttler.reset(pair_key),
                self.account_throttler.reset(account_key),
            )

            sessions = SessionService(self.uow.sessions, self.session_lifetime)
            token, session = await sessions.create_session(user.id, is_passkey_verified=True)
            next_step = await resolve_next_step(self.uow, session)

            await self.uow.commit()

        return Return.ok(AuthenticatedSession(session_token=token, next_step=next_step))
