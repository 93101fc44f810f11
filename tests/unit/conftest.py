import fakeredis
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

from src.adapter.services.redis_store import flush_all
from tests.utils.fakes import FakeClock, make_limiter


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_username = AsyncMock(return_value=None)
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update_password_hash = AsyncMock()

    uow.emails = MagicMock()
    uow.emails.get = AsyncMock(return_value=None)
    uow.emails.get_by_user_id = AsyncMock(return_value=None)
    uow.emails.upsert = AsyncMock(side_effect=lambda email: email)
    uow.emails.mark_verified = AsyncMock()

    uow.email_verifications = MagicMock()
    uow.email_verifications.get_by_email = AsyncMock(return_value=None)
    uow.email_verifications.replace = AsyncMock(side_effect=lambda v: v)
    uow.email_verifications.delete_by_email = AsyncMock(return_value=1)

    uow.password_resets = MagicMock()
    uow.password_resets.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_resets.replace_for_user = AsyncMock(side_effect=lambda r: r)
    uow.password_resets.delete_by_token_hash = AsyncMock(return_value=True)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock(side_effect=lambda s: s)
    uow.sessions.update_expiration = AsyncMock()
    uow.sessions.mark_two_factor_verified = AsyncMock()
    uow.sessions.delete_by_id = AsyncMock(return_value=True)
    uow.sessions.delete_all_by_user_id = AsyncMock(return_value=0)

    uow.passkeys = MagicMock()
    uow.passkeys.get_for_user = AsyncMock(return_value=None)
    uow.passkeys.create = AsyncMock(side_effect=lambda p: p)
    uow.passkeys.update_sign_count = AsyncMock()

    uow.two_factor_credentials = MagicMock()
    uow.two_factor_credentials.get_by_user_id = AsyncMock(return_value=None)
    uow.two_factor_credentials.create = AsyncMock(side_effect=lambda c: c)
    return uow


@pytest.fixture
def limiter():
    return make_limiter()


@pytest.fixture
def mailer():
    mailer = MagicMock()
    mailer.send_verification_code = AsyncMock()
    mailer.send_password_reset_link = AsyncMock()
    return mailer


@pytest.fixture
def strength_checker():
    checker = MagicMock()
    checker.is_strong = AsyncMock(return_value=True)
    return checker


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def redis():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    await flush_all(client)
    yield client
    await flush_all(client)
    await client.aclose()
