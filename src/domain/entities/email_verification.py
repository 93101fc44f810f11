"""
EmailVerification Entity

Short human-enterable codes proving ownership of an email address.
"""

from datetime import datetime

from sqlmodel import Column, DateTime, Field, SQLModel


class EmailVerification(SQLModel, table=True):
    """
    EmailVerification entity - one outstanding code per email address.

    Business Rules:
    - Keyed by email, not user: inserting a new code replaces the old one
      for that address only
    - Stored in clear (short-lived, rate-limited)
    - Deleted on successful verification
    """

    __tablename__ = "email_verifications"

    email: str = Field(
        primary_key=True, max_length=255, foreign_key="emails.email", ondelete="CASCADE"
    )
    code: str = Field(max_length=32)

    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
