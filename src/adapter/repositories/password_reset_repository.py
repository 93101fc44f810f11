from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_repository import IPasswordResetRepository
from src.domain.entities import PasswordReset


class PasswordResetRepository(IPasswordResetRepository):
    """PasswordReset repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordReset]:
        """Get password reset by token hash"""
        stmt = select(PasswordReset).where(PasswordReset.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def replace_for_user(self, reset: PasswordReset) -> PasswordReset:
        """Invalidate existing resets for the user and insert the new one"""
        await self.delete_by_user_id(reset.user_id)
        self.session.add(reset)
        await self.session.flush()
        await self.session.refresh(reset)
        return reset

    async def delete_by_token_hash(self, token_hash: str) -> bool:
        """Delete a reset. Returns True if it existed."""
        stmt = delete(PasswordReset).where(PasswordReset.token_hash == token_hash)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete every reset of a user. Returns count."""
        stmt = delete(PasswordReset).where(PasswordReset.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
