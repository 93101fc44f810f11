from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.session_repository import ISessionRepository
from src.domain.entities import Session


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: str) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> List[Session]:
        """Get all sessions for a user"""
        stmt = select(Session).where(Session.user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def update_expiration(self, session_id: str, expires_at: datetime) -> None:
        """Move a session's expiry"""
        stmt = update(Session).where(Session.id == session_id).values(expires_at=expires_at)
        await self.session.execute(stmt)
        await self.session.flush()

    async def mark_two_factor_verified(self, session_id: str) -> None:
        """Set is_two_factor_verified on a session"""
        stmt = (
            update(Session)
            .where(Session.id == session_id)
            .values(is_two_factor_verified=True)
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def delete_by_id(self, session_id: str) -> bool:
        """Delete a specific session by ID"""
        stmt = delete(Session).where(Session.id == session_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_all_by_user_id(self, user_id: UUID) -> int:
        """Delete all sessions for a user"""
        stmt = delete(Session).where(Session.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
