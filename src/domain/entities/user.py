"""
User Entity

Represents a person who can authenticate with a password and/or passkeys.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now


class User(SQLModel, table=True):
    """
    User entity - identity with one email, optional 2FA and passkeys.

    Business Rules:
    - Username is unique and stored lower-case
    - Password stored as argon2id hash
    - password_hash may only be null when the user has at least one passkey
    - Deleting a user cascades to email, secrets, sessions and credentials
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    username: str = Field(unique=True, index=True, max_length=31)
    password_hash: Optional[str] = Field(default=None, max_length=255)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
