from abc import ABC, abstractmethod

from src.app.repositories.email_repository import IEmailRepository
from src.app.repositories.email_verification_repository import IEmailVerificationRepository
from src.app.repositories.passkey_repository import IPasskeyRepository
from src.app.repositories.password_reset_repository import IPasswordResetRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.two_factor_credential_repository import ITwoFactorCredentialRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    emails: IEmailRepository
    email_verifications: IEmailVerificationRepository
    password_resets: IPasswordResetRepository
    sessions: ISessionRepository
    passkeys: IPasskeyRepository
    two_factor_credentials: ITwoFactorCredentialRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
