from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import Email


class IEmailRepository(ABC):
    """Email repository interface - application layer"""

    @abstractmethod
    async def get(self, email: str) -> Optional[Email]:
        """Get email record by lower-cased address"""
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> Optional[Email]:
        """Get the email record owned by a user"""
        pass

    @abstractmethod
    async def upsert(self, email: Email) -> Email:
        """Insert or update an email record"""
        pass

    @abstractmethod
    async def mark_verified(self, email: str) -> None:
        """Set is_verified for an address"""
        pass
