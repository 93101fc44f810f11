from datetime import timedelta
from uuid import uuid4

import pytest

from src.app.services.session_service import SessionService
from src.app.use_cases.auth import LogoutUseCase, ValidateSessionUseCase
from src.domain.base import utc_now
from src.domain.entities import AuthStep, Email, Session, TwoFactorCredential, User
from tests.utils.fakes import make_context

TOKEN = "session-token"


@pytest.fixture
def user():
    return User(id=uuid4(), username="alice", password_hash="hash")


def make_session(user: User, **kwargs) -> Session:
    data = {
        "id": SessionService.session_id_from_token(TOKEN),
        "user_id": user.id,
        "expires_at": utc_now() + timedelta(days=25),
    }
    data.update(kwargs)
    return Session(**data)


@pytest.mark.asyncio
async def test_validate_session(mock_uow, user):
    mock_uow.sessions.get_by_id.return_value = make_session(user)
    mock_uow.users.get_by_id.return_value = user
    mock_uow.emails.get_by_user_id.return_value = Email(email="alice@example.com", is_verified=True, user_id=user.id)
    mock_uow.two_factor_credentials.get_by_user_id.return_value = TwoFactorCredential(user_id=user.id, secret="JBSWY3DPEHPK3PXP")

    result = await ValidateSessionUseCase(mock_uow).execute(TOKEN)

    context = result.value
    assert context.user_id == str(user.id)
    assert context.username == "alice"
    assert context.email == "alice@example.com"
    assert context.email_verified is True
    assert context.has_two_factor is True
    assert context.next_step == AuthStep.two_factor


@pytest.mark.asyncio
async def test_unknown_token_is_unauthenticated(mock_uow):
    result = await ValidateSessionUseCase(mock_uow).execute(TOKEN)

    assert result.error.code == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_expired_session_is_deleted_and_committed(mock_uow, user):
    mock_uow.sessions.get_by_id.return_value = make_session(user, expires_at=utc_now() - timedelta(minutes=1))

    result = await ValidateSessionUseCase(mock_uow).execute(TOKEN)

    assert result.error.code == "UNAUTHENTICATED"
    mock_uow.sessions.delete_by_id.assert_awaited_once()
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_logout_deletes_current_session_only(mock_uow):
    context = make_context()

    result = await LogoutUseCase(mock_uow).execute(context)

    assert result.is_ok()
    mock_uow.sessions.delete_by_id.assert_awaited_once_with(context.session_id)
    mock_uow.sessions.delete_all_by_user_id.assert_not_awaited()
    mock_uow.commit.assert_awaited_once()
