"""
Email Entity

The single email address owned by a user.
"""

from uuid import UUID

from sqlmodel import Field, SQLModel


class Email(SQLModel, table=True):
    """
    Email entity - one-to-one with User.

    Business Rules:
    - Address is stored lower-case and is unique across all users
    - is_verified flips to True only through the verification code flow
    """

    __tablename__ = "emails"

    email: str = Field(primary_key=True, max_length=255)
    is_verified: bool = Field(default=False)

    user_id: UUID = Field(
        foreign_key="users.id", ondelete="CASCADE", unique=True, index=True
    )
