import fakeredis
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from tests.fixtures.json_loader import TestDataLoader
from tests.utils.fakes import RecordingMailer, bearer, session_token_from
from src.adapter.services.redis_store import flush_all
from src.app.services.password import PasswordStrengthChecker, has_valid_length
from src.depends import (
    enable_sqlite_foreign_keys,
    get_mailer,
    get_password_strength_checker,
    get_redis,
    get_unit_of_work,
)
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork


class LengthOnlyChecker(PasswordStrengthChecker):
    """Strength policy without the breach lookup; "password123" counts as breached"""

    async def is_strong(self, password: str) -> bool:
        return has_valid_length(password) and password != "password123"


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def uow(db_session):
    return SqlAlchemyUnitOfWork(db_session)


@pytest_asyncio.fixture
async def redis():
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    await flush_all(client)
    yield client
    await flush_all(client)
    await client.aclose()


@pytest_asyncio.fixture
def mailer():
    return RecordingMailer()


@pytest_asyncio.fixture
async def app(db_session, redis, mailer):
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_redis] = lambda: redis
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_password_strength_checker] = LengthOnlyChecker
    return app


@pytest_asyncio.fixture
async def client(app):
    from httpx import ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def signed_up(client, mailer, test_data):
    """Signs up the default user; returns (session token, emailed code)"""
    payload = test_data.get_copy("signup")
    response = await client.post("/auth/signup", json=payload)
    assert response.status_code == 302
    return session_token_from(response), mailer.codes[payload["email"].lower()]


@pytest_asyncio.fixture
async def verified(client, signed_up):
    """Signed up and email verified; returns the new session token"""
    token, code = signed_up
    response = await client.post("/auth/email-verification", json={"code": code}, headers=bearer(token))
    assert response.status_code == 302
    return session_token_from(response)
