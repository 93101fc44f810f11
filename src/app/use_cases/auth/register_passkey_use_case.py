"""
Register Passkey Use Case

Binds a new WebAuthn credential to the signed-in user.
"""

import logging
from uuid import UUID

from src.app.services.passkey_challenge_store import PasskeyChallengeStore
from src.app.services.passkey_verifier import PasskeyVerifier, b64url_decode, parse_sign_count
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthStep, Passkey
from src.libs.result import Error, Result, Return
from .dtos import PasskeyResponse, RegisterPasskeyCommand, SessionContext

logger = logging.getLogger(__name__)


class RegisterPasskeyUseCase:
    """
    Use case for passkey registration.

    Business Rules:
    - Only a fully trusted session may add a credential
    - Challenge is single use
    - Client data must be a "webauthn.create" ceremony for this relying party
    - Public key must be an ES256 (P-256) or RS256 SubjectPublicKeyInfo
    """

    def __init__(
        self, uow: UnitOfWork, challenges: PasskeyChallengeStore, verifier: PasskeyVerifier
    ):
        self.uow = uow
        self.challenges = challenges
        self.verifier = verifier

    async def execute(
        self, context: SessionContext, command: RegisterPasskeyCommand
    ) -> Result[PasskeyResponse]:
        if context.next_step != AuthStep.complete:
            return Return.err(Error("SESSION_NOT_TRUSTED", "Finish signing in first"))

        if await self.challenges.consume(command.challenge) is None:
            return Return.err(
                Error("CHALLENGE_NOT_FOUND", "Challenge has expired or was already used")
            )

        if not self.verifier.verify_registration(
            challenge=command.challenge,
            client_data_json=command.client_data_json,
            authenticator_data=command.authenticator_data,
        ) or not self.verifier.is_supported_public_key(command.public_key, command.algorithm):
            return Return.err(Error("INVALID_PASSKEY", "Invalid passkey"))

        async with self.uow:
            passkey = Passkey(
                id=command.credential_id,
                user_id=UUID(context.user_id),
                name=command.name,
                public_key=command.public_key,
                algorithm=command.algorithm,
                sign_count=parse_sign_count(b64url_decode(command.authenticator_data)),
            )
            passkey = await self.uow.passkeys.create(passkey)
            await self.uow.commit()

        logger.info(f"Passkey registered for user {context.user_id}")
        return Return.ok(
            PasskeyResponse(
                id=passkey.id,
                name=passkey.name,
                algorithm=passkey.algorithm,
                created_at=passkey.created_at,
            )
        )
