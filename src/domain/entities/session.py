"""
Session Entity

Server-side sessions carrying step-up authentication flags.
"""

from datetime import datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class Session(SQLModel, table=True):
    """
    Session entity - one authenticated browser/device.

    Business Rules:
    - id is the SHA-256 hash of the opaque token held in the cookie
    - Factor flags are independent (passkey login never sets 2FA, etc.)
    - Invalidation deletes the row
    - Expires after 30 days, extended while in use
    """

    __tablename__ = "sessions"

    id: str = Field(primary_key=True, max_length=64)

    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE")

    is_two_factor_verified: bool = Field(default=False)
    is_passkey_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (
        Index("idx_session_user_id", "user_id"),
        Index("idx_session_expires_at", "expires_at"),
    )
