"""
Session factor state machine.

A session's trust level is the combination of independent factors: the
user's email verification, the session's two-factor flag and its passkey
flag. A passkey login satisfies the second-factor requirement on its own.
"""

from src.domain.entities import AuthStep, Session


def next_auth_step(email_verified: bool, has_two_factor: bool, session: Session) -> AuthStep:
    """Return the next step the session must complete, or AuthStep.complete."""
    if not email_verified:
        return AuthStep.email_verification
    if has_two_factor and not (session.is_two_factor_verified or session.is_passkey_verified):
        return AuthStep.two_factor
    return AuthStep.complete


def is_fully_trusted(email_verified: bool, has_two_factor: bool, session: Session) -> bool:
    return next_auth_step(email_verified, has_two_factor, session) == AuthStep.complete
