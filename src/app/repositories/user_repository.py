from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by lower-cased username"""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get the user owning a lower-cased email address"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        """Replace the user's password hash"""
        pass

    @abstractmethod
    async def delete(self, user_id: UUID) -> bool:
        """Delete a user; email, secrets, sessions and credentials cascade"""
        pass
