"""
Authentication Use Case DTOs (Data Transfer Objects)

All Command and Response classes for auth domain.
Provides type safety and clear contracts between layers.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.domain.entities import AuthStep


# ============================================================================
# Command DTOs
# ============================================================================


class SignupCommand(BaseModel):
    """
    Signup command - represents validated signup intent

    Created by API layer after request validation passes.
    Contains only business-relevant data (no HTTP concerns).
    """

    username: str
    email: str
    password: str


class PasskeyLoginCommand(BaseModel):
    """Passkey assertion as posted by the browser (base64url fields)"""

    username_or_email: str
    credential_id: str
    challenge: str
    client_data_json: str
    authenticator_data: str
    signature: str


class RegisterPasskeyCommand(BaseModel):
    """Passkey attestation as posted by the browser (base64url fields)"""

    credential_id: str
    name: str
    public_key: str
    algorithm: int
    challenge: str
    client_data_json: str
    authenticator_data: str


# ============================================================================
# Response DTOs
# ============================================================================


class AuthenticatedSession(BaseModel):
    """
    Outcome of any flow that issues a new session.

    session_token goes to the cookie; next_step tells the client where
    to continue.
    """

    session_token: str
    next_step: AuthStep


class SessionContext(BaseModel):
    """Resolved state of the session presented by a request"""

    session_id: str
    user_id: str
    username: str
    email: str
    email_verified: bool
    has_two_factor: bool
    is_two_factor_verified: bool
    is_passkey_verified: bool
    expires_at: datetime
    next_step: AuthStep


class ResendVerificationResponse(BaseModel):
    """Response for resend verification email use case"""

    status: str
    message: str


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    status: str
    message: str


class PasswordResetTokenStatus(BaseModel):
    """Response for the reset link pre-check"""

    valid: bool
    message: str


class ConfirmPasswordResetResponse(BaseModel):
    """Response for confirm password reset use case"""

    status: str
    message: str


class TwoFactorSetupResponse(BaseModel):
    """Fresh TOTP secret offered to the user before it is stored"""

    secret: str
    uri: str


class TwoFactorEnabledResponse(BaseModel):
    status: str
    message: str


class PasskeyChallengeResponse(BaseModel):
    challenge: str


class PasskeyResponse(BaseModel):
    id: str
    name: str
    algorithm: int
    created_at: Optional[datetime] = None
