from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.email_repository import IEmailRepository
from src.domain.entities import Email


class EmailRepository(IEmailRepository):
    """Email repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, email: str) -> Optional[Email]:
        """Get email record by lower-cased address"""
        stmt = select(Email).where(Email.email == email.lower())
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_id(self, user_id: UUID) -> Optional[Email]:
        """Get the email record owned by a user"""
        stmt = select(Email).where(Email.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def upsert(self, email: Email) -> Email:
        """Insert or update an email record"""
        email.email = email.email.lower()
        email = await self.session.merge(email)
        await self.session.flush()
        return email

    async def mark_verified(self, email: str) -> None:
        """Set is_verified for an address"""
        stmt = update(Email).where(Email.email == email.lower()).values(is_verified=True)
        await self.session.execute(stmt)
        await self.session.flush()
