from typing import Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.email_verification_repository import IEmailVerificationRepository
from src.domain.entities import EmailVerification


class EmailVerificationRepository(IEmailVerificationRepository):
    """EmailVerification repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[EmailVerification]:
        """Get the outstanding verification for an address"""
        stmt = select(EmailVerification).where(EmailVerification.email == email.lower())
        result = await self.session.exec(stmt)
        return result.first()

    async def replace(self, verification: EmailVerification) -> EmailVerification:
        """
        Delete any verification for the same address, then insert this one.

        Both statements run in the caller's transaction, so a concurrent
        reader never sees two codes (or none) for the address.
        """
        verification.email = verification.email.lower()
        await self.delete_by_email(verification.email)
        self.session.add(verification)
        await self.session.flush()
        await self.session.refresh(verification)
        return verification

    async def delete_by_email(self, email: str) -> int:
        """Delete verifications for an address. Returns count."""
        stmt = delete(EmailVerification).where(EmailVerification.email == email.lower())
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
