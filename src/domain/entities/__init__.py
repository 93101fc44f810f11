"""
Auth Core Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import AuthStep, PasskeyAlgorithm, ThrottleResetType

# Export all entities
from .user import User
from .email import Email
from .email_verification import EmailVerification
from .password_reset import PasswordReset
from .session import Session
from .passkey import Passkey
from .two_factor_credential import TwoFactorCredential

__all__ = [
    # Enums
    "AuthStep",
    "PasskeyAlgorithm",
    "ThrottleResetType",
    # Entities
    "User",
    "Email",
    "EmailVerification",
    "PasswordReset",
    "Session",
    "Passkey",
    "TwoFactorCredential",
]
