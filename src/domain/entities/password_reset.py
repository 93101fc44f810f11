"""
PasswordReset Entity

Hashed single-use password reset tokens.
"""

from datetime import datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, Index, SQLModel


class PasswordReset(SQLModel, table=True):
    """
    PasswordReset entity - secure password reset tokens.

    Business Rules:
    - Only the SHA-256 hash of the token is stored
    - At most one active reset per user
    - Expires after 2 hours
    - Deleted in the same transaction that updates the password
    """

    __tablename__ = "password_resets"

    token_hash: str = Field(primary_key=True, max_length=64)  # SHA-256 output
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE")

    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    __table_args__ = (Index("idx_password_reset_user_id", "user_id"),)
