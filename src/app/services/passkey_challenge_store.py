from abc import ABC, abstractmethod
from typing import Optional


class PasskeyChallengeStore(ABC):
    """Single-use WebAuthn challenge storage - application layer"""

    @abstractmethod
    async def create(self) -> str:
        """Issue a new base64url challenge"""
        pass

    @abstractmethod
    async def consume(self, challenge: str) -> Optional[str]:
        """Remove the challenge; returns it if it was still outstanding"""
        pass
