import secrets
from typing import Optional

from src.app.services.passkey_challenge_store import PasskeyChallengeStore
from src.app.services.passkey_verifier import b64url_encode

CHALLENGE_BYTES = 32


class RedisPasskeyChallengeStore(PasskeyChallengeStore):
    """Challenges live in Redis with a TTL and are removed on first use"""

    def __init__(self, storage, expires_seconds: int = 300, prefix: str = "passkey-challenge"):
        self.storage = storage
        self.expires_seconds = expires_seconds
        self.prefix = prefix

    async def create(self) -> str:
        challenge = b64url_encode(secrets.token_bytes(CHALLENGE_BYTES))
        await self.storage.set(f"{self.prefix}:{challenge}", "1", ex=self.expires_seconds)
        return challenge

    async def consume(self, challenge: str) -> Optional[str]:
        stored = await self.storage.getdel(f"{self.prefix}:{challenge}")
        return challenge if stored is not None else None
