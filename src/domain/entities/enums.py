"""
Auth Core Domain Enums

All enumeration types used across domain entities and services.
"""

from enum import Enum


class AuthStep(str, Enum):
    """Next step a session must complete before it is fully trusted"""

    email_verification = "email_verification"
    two_factor = "two_factor"
    complete = "complete"


class ThrottleResetType(str, Enum):
    """How a throttler forgives failures after a success"""

    instant = "instant"
    decay = "decay"


class PasskeyAlgorithm(int, Enum):
    """COSE algorithm identifiers accepted for passkeys"""

    ES256 = -7
    RS256 = -257
