from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import PasswordReset


class IPasswordResetRepository(ABC):
    """PasswordReset repository interface - application layer"""

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        """Get password reset by token hash"""
        pass

    @abstractmethod
    async def replace_for_user(self, reset: PasswordReset) -> PasswordReset:
        """Delete every reset of the same user, then insert this one"""
        pass

    @abstractmethod
    async def delete_by_token_hash(self, token_hash: str) -> bool:
        """Delete a reset. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete every reset of a user. Returns count."""
        pass
