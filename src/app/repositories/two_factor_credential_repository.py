from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import TwoFactorCredential


class ITwoFactorCredentialRepository(ABC):
    """TwoFactorCredential repository interface - application layer"""

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[TwoFactorCredential]:
        """Get a user's TOTP credential"""
        pass

    @abstractmethod
    async def create(self, credential: TwoFactorCredential) -> TwoFactorCredential:
        """Store a TOTP credential"""
        pass
