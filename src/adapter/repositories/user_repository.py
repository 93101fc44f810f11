from typing import Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_repository import IUserRepository
from src.domain.entities import Email, User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by lower-cased username"""
        stmt = select(User).where(User.username == username.lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get the user owning a lower-cased email address"""
        stmt = (
            select(User)
            .join(Email, Email.user_id == User.id)
            .where(Email.email == email.lower())
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, user: User) -> User:
        """Create a new user"""
        user.username = user.username.lower()
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def update_password_hash(self, user_id: UUID, password_hash: str) -> None:
        """Replace the user's password hash"""
        stmt = update(User).where(User.id == user_id).values(password_hash=password_hash)
        await self.session.execute(stmt)
        await self.session.flush()

    async def delete(self, user_id: UUID) -> bool:
        """Delete a user; dependent rows go through ON DELETE CASCADE"""
        stmt = delete(User).where(User.id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
