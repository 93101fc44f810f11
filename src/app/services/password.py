"""
Password hashing and strength checking.

Hashes use argon2id with a fixed parameter set. Changing the parameters
makes newly written hashes differ from stored ones, but stored hashes
stay verifiable because argon2 encodes its parameters in the hash string.
"""

import logging
from abc import ABC, abstractmethod

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 255

ARGON2_CONFIG = {
    "memory_cost": 19456,  # KiB
    "time_cost": 2,
    "parallelism": 1,
    "hash_len": 32,
    "salt_len": 16,
    "type": Type.ID,
}

_hasher = PasswordHasher(**ARGON2_CONFIG)

# Verified against when no account matches, so unknown users take as long
# as wrong passwords.
_DUMMY_HASH = _hasher.hash("dummy-password-for-timing")


def hash_password(password: str) -> str:
    return _hasher.hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    """Return True if password matches; never raises for a mismatch or a malformed hash"""
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def verify_dummy_password(password: str) -> None:
    verify_password(_DUMMY_HASH, password)


def has_valid_length(password: str) -> bool:
    return PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH


class PasswordStrengthChecker(ABC):
    """Password strength policy - application layer"""

    @abstractmethod
    async def is_strong(self, password: str) -> bool:
        """
        Return False for passwords that must be rejected.

        Raises when an external lookup fails so the caller can fail closed.
        """
        pass
