"""
Session lifecycle.

The client holds an opaque random token; the database holds only its
SHA-256 hash as the session id, so a leaked sessions table cannot be
replayed as cookies.
"""

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional, Tuple
from uuid import UUID

from src.app.repositories.session_repository import ISessionRepository
from src.domain.base import utc_now
from src.domain.entities import Session

logger = logging.getLogger(__name__)


class SessionService:
    def __init__(self, sessions: ISessionRepository, lifetime: timedelta = timedelta(days=30)):
        self.sessions = sessions
        self.lifetime = lifetime

    @staticmethod
    def generate_session_token() -> str:
        return secrets.token_urlsafe(32)

    @staticmethod
    def session_id_from_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    async def create_session(
        self,
        user_id: UUID,
        is_two_factor_verified: bool = False,
        is_passkey_verified: bool = False,
    ) -> Tuple[str, Session]:
        """Create a session; returns (token for the cookie, stored session)"""
        token = self.generate_session_token()
        session = Session(
            id=self.session_id_from_token(token),
            user_id=user_id,
            is_two_factor_verified=is_two_factor_verified,
            is_passkey_verified=is_passkey_verified,
            expires_at=utc_now() + self.lifetime,
        )
        session = await self.sessions.create(session)
        return token, session

    async def validate_session_token(self, token: str) -> Optional[Session]:
        """
        Resolve a cookie token to a live session.

        Expired sessions are deleted. A session with less than half of its
        lifetime left is extended to a full lifetime from now.
        """
        session = await self.sessions.get_by_id(self.session_id_from_token(token))
        if session is None:
            return None

        now = utc_now()
        if now >= session.expires_at:
            await self.sessions.delete_by_id(session.id)
            return None

        if now >= session.expires_at - self.lifetime / 2:
            session.expires_at = now + self.lifetime
            await self.sessions.update_expiration(session.id, session.expires_at)

        return session

    async def invalidate_session(self, session_id: str) -> None:
        await self.sessions.delete_by_id(session_id)

    async def invalidate_user_sessions(self, user_id: UUID) -> int:
        count = await self.sessions.delete_all_by_user_id(user_id)
        logger.info(f"Invalidated {count} session(s) for user {user_id}")
        return count
