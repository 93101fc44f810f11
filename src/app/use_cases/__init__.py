"""
Use Cases

Organized into domain folders:
- auth/: Authentication flows (login, sessions, secrets, second factors)
"""

from .auth import (
    SignupUseCase,
    SignupCommand,
    LoginUseCase,
    PasskeyLoginUseCase,
    LogoutUseCase,
    ValidateSessionUseCase,
    VerifyEmailUseCase,
    ResendVerificationUseCase,
    RequestPasswordResetUseCase,
    ConfirmPasswordResetUseCase,
)

__all__ = [
    "SignupUseCase",
    "SignupCommand",
    "LoginUseCase",
    "PasskeyLoginUseCase",
    "LogoutUseCase",
    "ValidateSessionUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
]
