from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.two_factor_credential_repository import (
    ITwoFactorCredentialRepository,
)
from src.domain.entities import TwoFactorCredential


class TwoFactorCredentialRepository(ITwoFactorCredentialRepository):
    """TwoFactorCredential repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: UUID) -> Optional[TwoFactorCredential]:
        stmt = select(TwoFactorCredential).where(TwoFactorCredential.user_id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def create(self, credential: TwoFactorCredential) -> TwoFactorCredential:
        self.session.add(credential)
        await self.session.flush()
        await self.session.refresh(credential)
        return credential
