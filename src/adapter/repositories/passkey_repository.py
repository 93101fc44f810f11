from typing import Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.passkey_repository import IPasskeyRepository
from src.domain.entities import Passkey


class PasskeyRepository(IPasskeyRepository):
    """Passkey repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_user(self, credential_id: str, user_id: UUID) -> Optional[Passkey]:
        """Get a credential only if it is bound to the given user"""
        stmt = select(Passkey).where(Passkey.id == credential_id, Passkey.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def count_by_user_id(self, user_id: UUID) -> int:
        """Number of passkeys registered by a user"""
        stmt = select(func.count()).select_from(Passkey).where(Passkey.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one()

    async def create(self, passkey: Passkey) -> Passkey:
        """Register a new passkey"""
        self.session.add(passkey)
        await self.session.flush()
        await self.session.refresh(passkey)
        return passkey

    async def update_sign_count(self, credential_id: str, sign_count: int) -> None:
        """Store the authenticator's latest signature counter"""
        stmt = update(Passkey).where(Passkey.id == credential_id).values(sign_count=sign_count)
        await self.session.execute(stmt)
        await self.session.flush()
