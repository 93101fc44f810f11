"""Lookups shared by the authentication use cases."""

from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.domain.auth_flow import next_auth_step
from src.domain.entities import AuthStep, Session, User


async def find_user(uow: UnitOfWork, username_or_email: str) -> Optional[User]:
    """Identifiers containing "@" are email addresses, everything else a username"""
    identifier = username_or_email.strip().lower()
    if "@" in identifier:
        return await uow.users.get_by_email(identifier)
    return await uow.users.get_by_username(identifier)


async def resolve_next_step(uow: UnitOfWork, session: Session) -> AuthStep:
    email = await uow.emails.get_by_user_id(session.user_id)
    credential = await uow.two_factor_credentials.get_by_user_id(session.user_id)
    return next_auth_step(
        email_verified=email is not None and email.is_verified,
        has_two_factor=credential is not None,
        session=session,
    )
