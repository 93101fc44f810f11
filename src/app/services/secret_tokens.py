"""
Secret token helpers.

Email verification codes are short and meant to be typed by a human, so
they are stored as-is. Password reset tokens travel in a link and only
their SHA-256 hash is ever persisted.
"""

import base64
import hashlib
import hmac
import secrets
import string
from datetime import datetime
from typing import Optional

from src.domain.base import utc_now

EMAIL_VERIFICATION_ALPHABET = string.digits + string.ascii_uppercase
PASSWORD_RESET_TOKEN_BYTES = 25


def generate_email_verification_code(length: int = 8) -> str:
    return "".join(secrets.choice(EMAIL_VERIFICATION_ALPHABET) for _ in range(length))


def generate_password_reset_token() -> str:
    """40 lower-case base32 characters (200 bits), safe in a URL path"""
    raw = secrets.token_bytes(PASSWORD_RESET_TOKEN_BYTES)
    return base64.b32encode(raw).decode("ascii").lower().rstrip("=")


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def codes_match(expected: str, provided: str) -> bool:
    """Constant-time comparison of a stored code with user input"""
    return hmac.compare_digest(expected.encode("utf-8"), provided.strip().upper().encode("utf-8"))


def is_within_expiration_date(expires_at: datetime, now: Optional[datetime] = None) -> bool:
    return (now or utc_now()) <= expires_at
