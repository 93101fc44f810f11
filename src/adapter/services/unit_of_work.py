from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.email_repository import EmailRepository
from src.adapter.repositories.email_verification_repository import EmailVerificationRepository
from src.adapter.repositories.passkey_repository import PasskeyRepository
from src.adapter.repositories.password_reset_repository import PasswordResetRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.two_factor_credential_repository import (
    TwoFactorCredentialRepository,
)
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.emails = EmailRepository(self.session)
        self.email_verifications = EmailVerificationRepository(self.session)
        self.password_resets = PasswordResetRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.passkeys = PasskeyRepository(self.session)
        self.two_factor_credentials = TwoFactorCredentialRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
