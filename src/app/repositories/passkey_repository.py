from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Passkey


class IPasskeyRepository(ABC):
    """Passkey repository interface - application layer"""

    @abstractmethod
    async def get_for_user(self, credential_id: str, user_id: UUID) -> Optional[Passkey]:
        """Get a credential only if it is bound to the given user"""
        pass

    @abstractmethod
    async def count_by_user_id(self, user_id: UUID) -> int:
        """Number of passkeys registered by a user"""
        pass

    @abstractmethod
    async def create(self, passkey: Passkey) -> Passkey:
        """Register a new passkey"""
        pass

    @abstractmethod
    async def update_sign_count(self, credential_id: str, sign_count: int) -> None:
        """Store the authenticator's latest signature counter"""
        pass
