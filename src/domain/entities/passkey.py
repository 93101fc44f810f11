"""
Passkey Entity

Registered WebAuthn credentials.
"""

from datetime import datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class Passkey(SQLModel, table=True):
    """
    Passkey entity - a public key bound to a credential id.

    Business Rules:
    - id is the base64url credential id reported by the authenticator
    - public_key is SubjectPublicKeyInfo DER, base64url encoded
    - sign_count must never decrease (cloned authenticator detection)
    """

    __tablename__ = "passkeys"

    id: str = Field(primary_key=True, max_length=1024)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE")

    name: str = Field(default="Passkey", max_length=255)
    public_key: str
    algorithm: int
    sign_count: int = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_passkey_user_id", "user_id"),)
