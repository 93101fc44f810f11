from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import Session


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: str) -> Optional[Session]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_user_id(self, user_id: UUID) -> List[Session]:
        """Get all sessions for a user"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def update_expiration(self, session_id: str, expires_at: datetime) -> None:
        """Move a session's expiry"""
        pass

    @abstractmethod
    async def mark_two_factor_verified(self, session_id: str) -> None:
        """Set is_two_factor_verified on a session"""
        pass

    @abstractmethod
    async def delete_by_id(self, session_id: str) -> bool:
        """Delete a session. Returns True if it existed."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions for a user. Returns count."""
        pass
