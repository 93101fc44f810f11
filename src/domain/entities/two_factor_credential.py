"""
TwoFactorCredential Entity

TOTP shared secrets.
"""

from datetime import datetime
from uuid import UUID

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now


class TwoFactorCredential(SQLModel, table=True):
    """TOTP secret for a user (at most one)"""

    __tablename__ = "two_factor_credentials"

    user_id: UUID = Field(primary_key=True, foreign_key="users.id", ondelete="CASCADE")
    secret: str = Field(max_length=64)  # base32

    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
