"""
Authentication Use Cases

All authentication-related business logic.
"""

from .signup_use_case import SignupUseCase
from .login_use_case import LoginUseCase
from .passkey_login_use_case import PasskeyLoginUseCase
from .create_passkey_challenge_use_case import CreatePasskeyChallengeUseCase
from .register_passkey_use_case import RegisterPasskeyUseCase
from .logout_use_case import LogoutUseCase
from .validate_session_use_case import ValidateSessionUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .setup_two_factor_use_case import SetupTwoFactorUseCase
from .verify_two_factor_use_case import VerifyTwoFactorUseCase
from .dtos import (
    SignupCommand,
    PasskeyLoginCommand,
    RegisterPasskeyCommand,
    AuthenticatedSession,
    SessionContext,
    ResendVerificationResponse,
    RequestPasswordResetResponse,
    PasswordResetTokenStatus,
    ConfirmPasswordResetResponse,
    TwoFactorSetupResponse,
    TwoFactorEnabledResponse,
    PasskeyChallengeResponse,
    PasskeyResponse,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "LoginUseCase",
    "PasskeyLoginUseCase",
    "CreatePasskeyChallengeUseCase",
    "RegisterPasskeyUseCase",
    "LogoutUseCase",
    "ValidateSessionUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    "SetupTwoFactorUseCase",
    "VerifyTwoFactorUseCase",
    # DTOs - Commands
    "SignupCommand",
    "PasskeyLoginCommand",
    "RegisterPasskeyCommand",
    # DTOs - Responses
    "AuthenticatedSession",
    "SessionContext",
    "ResendVerificationResponse",
    "RequestPasswordResetResponse",
    "PasswordResetTokenStatus",
    "ConfirmPasswordResetResponse",
    "TwoFactorSetupResponse",
    "TwoFactorEnabledResponse",
    "PasskeyChallengeResponse",
    "PasskeyResponse",
]
