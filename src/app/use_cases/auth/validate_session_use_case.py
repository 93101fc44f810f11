"""
Validate Session Use Case

Resolves the session token presented by a request.
"""

from datetime import timedelta

from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.auth_flow import next_auth_step
from src.libs.result import Error, Result, Return
from .dtos import SessionContext

UNAUTHENTICATED = Error("UNAUTHENTICATED", "Not signed in")


class ValidateSessionUseCase:
    """
    Business Rules:
    - Unknown and expired tokens are UNAUTHENTICATED
    - Expired sessions are deleted on sight
    - Sessions past half their lifetime are extended
    """

    def __init__(self, uow: UnitOfWork, session_lifetime: timedelta = timedelta(days=30)):
        self.uow = uow
        self.session_lifetime = session_lifetime

    async def execute(self, token: str) -> Result[SessionContext]:
        async with self.uow:
            sessions = SessionService(self.uow.sessions, self.session_lifetime)
            session = await sessions.validate_session_token(token)
            if session is None:
                await self.uow.commit()
                return Return.err(UNAUTHENTICATED)

            user = await self.uow.users.get_by_id(session.user_id)
            if user is None:
                return Return.err(UNAUTHENTICATED)

            email = await self.uow.emails.get_by_user_id(user.id)
            credential = await self.uow.two_factor_credentials.get_by_user_id(user.id)
            await self.uow.commit()

            email_verified = email is not None and email.is_verified
            has_two_factor = credential is not None

            return Return.ok(
                SessionContext(
                    session_id=session.id,
                    user_id=str(user.id),
                    username=user.username,
                    email=email.email if email else "",
                    email_verified=email_verified,
                    has_two_factor=has_two_factor,
                    is_two_factor_verified=session.is_two_factor_verified,
                    is_passkey_verified=session.is_passkey_verified,
                    expires_at=session.expires_at,
                    next_step=next_auth_step(email_verified, has_two_factor, session),
                )
            )
