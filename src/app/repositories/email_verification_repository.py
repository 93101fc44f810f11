from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import EmailVerification


class IEmailVerificationRepository(ABC):
    """EmailVerification repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[EmailVerification]:
        """Get the outstanding verification for an address"""
        pass

    @abstractmethod
    async def replace(self, verification: EmailVerification) -> EmailVerification:
        """Delete any verification for the same address, then insert this one"""
        pass

    @abstractmethod
    async def delete_by_email(self, email: str) -> int:
        """Delete verifications for an address. Returns count."""
        pass
