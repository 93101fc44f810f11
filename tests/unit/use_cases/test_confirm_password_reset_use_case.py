from datetime import timedelta
from uuid import uuid4

import pytest
from argon2 import PasswordHasher

from src.app.services.secret_tokens import hash_token
from src.app.use_cases.auth import ConfirmPasswordResetUseCase
from src.domain.base import utc_now
from src.domain.entities import PasswordReset

TOKEN = "a" * 40


def make_reset(hours: int = 2) -> PasswordReset:
    return PasswordReset(
        token_hash=hash_token(TOKEN), user_id=uuid4(), expires_at=utc_now() + timedelta(hours=hours)
    )


@pytest.mark.asyncio
async def test_successful_reset(mock_uow, strength_checker):
    reset = make_reset()
    mock_uow.password_resets.get_by_token_hash.return_value = reset
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.execute(TOKEN, "NewSecurePass456!")

    assert result.is_ok()
    mock_uow.password_resets.get_by_token_hash.assert_awaited_once_with(hash_token(TOKEN))
    mock_uow.password_resets.delete_by_token_hash.assert_awaited_once_with(hash_token(TOKEN))
    user_id, password_hash = mock_uow.users.update_password_hash.call_args.args
    assert user_id == reset.user_id
    assert PasswordHasher().verify(password_hash, "NewSecurePass456!")
    mock_uow.sessions.delete_all_by_user_id.assert_awaited_once_with(reset.user_id)
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_unknown_token(mock_uow, strength_checker):
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.execute(TOKEN, "NewSecurePass456!")

    assert result.error.code == "TOKEN_NOT_FOUND"
    mock_uow.users.update_password_hash.assert_not_awaited()


@pytest.mark.asyncio
async def test_expired_token(mock_uow, strength_checker):
    mock_uow.password_resets.get_by_token_hash.return_value = make_reset(hours=-1)
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.execute(TOKEN, "NewSecurePass456!")

    assert result.error.code == "TOKEN_EXPIRED"
    assert result.error.message == "Password reset link has expired"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_weak_new_password(mock_uow, strength_checker):
    mock_uow.password_resets.get_by_token_hash.return_value = make_reset()
    strength_checker.is_strong.return_value = False
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.execute(TOKEN, "password")

    assert result.error.code == "WEAK_PASSWORD"
    mock_uow.password_resets.delete_by_token_hash.assert_not_awaited()


@pytest.mark.asyncio
async def test_token_consumed_by_concurrent_confirmation(mock_uow, strength_checker):
    mock_uow.password_resets.get_by_token_hash.return_value = make_reset()
    mock_uow.password_resets.delete_by_token_hash.return_value = False
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.execute(TOKEN, "NewSecurePass456!")

    assert result.error.code == "TOKEN_NOT_FOUND"
    mock_uow.users.update_password_hash.assert_not_awaited()
    mock_uow.sessions.delete_all_by_user_id.assert_not_awaited()
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_check_token_valid(mock_uow, strength_checker):
    mock_uow.password_resets.get_by_token_hash.return_value = make_reset()
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.check_token(TOKEN)

    assert result.value.valid is True
    mock_uow.password_resets.delete_by_token_hash.assert_not_awaited()


@pytest.mark.asyncio
async def test_check_token_deletes_expired_record(mock_uow, strength_checker):
    mock_uow.password_resets.get_by_token_hash.return_value = make_reset(hours=-1)
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.check_token(TOKEN)

    assert result.value.valid is False
    mock_uow.password_resets.delete_by_token_hash.assert_awaited_once_with(hash_token(TOKEN))
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_check_token_unknown(mock_uow, strength_checker):
    use_case = ConfirmPasswordResetUseCase(mock_uow, strength_checker)

    result = await use_case.check_token(TOKEN)

    assert result.value.valid is False
    assert result.value.message == "Password reset link has expired"
