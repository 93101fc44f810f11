import pytest
from httpx import AsyncClient

from src.adapter.rate_limit.throttler import Throttler
from src.depends import get_account_login_throttler, get_login_throttler
from tests.utils.fakes import FakeClock, bearer, session_token_from


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def throttled_app(app, redis, clock):
    """Login throttlers driven by a hand-moved clock"""
    app.dependency_overrides[get_login_throttler] = lambda: Throttler(
        "login-throttle", redis, timeout_seconds=[1, 2, 4], grace=5, clock=clock
    )
    app.dependency_overrides[get_account_login_throttler] = lambda: Throttler(
        "login-account-throttle", redis, timeout_seconds=[1, 2, 4], grace=20, clock=clock
    )
    return app


@pytest.mark.asyncio
async def test_login_by_username(client: AsyncClient, verified, test_data):
    response = await client.post("/auth/login", json=test_data.get_copy("login"))

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    token = session_token_from(response)
    assert token and token != verified


@pytest.mark.asyncio
async def test_login_by_email_before_verification(client: AsyncClient, signed_up, test_data):
    response = await client.post("/auth/login", json=test_data.get_copy("login_by_email"))

    assert response.status_code == 302
    assert response.headers["location"] == "/auth/email-verification"


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_user_look_the_same(client: AsyncClient, signed_up, test_data):
    wrong = await client.post("/auth/login", json=test_data.get_copy("login_wrong_password"))
    unknown = await client.post(
        "/auth/login", json={"username_or_email": "nobody", "password": "SecurePass123!"}
    )

    assert wrong.status_code == unknown.status_code == 400
    assert wrong.json() == unknown.json()
    assert wrong.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_throttled_after_grace(client: AsyncClient, throttled_app, signed_up, test_data, clock):
    for _ in range(6):
        response = await client.post("/auth/login", json=test_data.get_copy("login_wrong_password"))
        assert response.status_code == 400

    # Correct password is refused while the timeout runs
    response = await client.post("/auth/login", json=test_data.get_copy("login"))
    assert response.status_code == 429
    assert response.json()["error"]["code"] == "RATE_LIMITED"

    clock.advance(1)
    response = await client.post("/auth/login", json=test_data.get_copy("login"))
    assert response.status_code == 302


@pytest.mark.asyncio
async def test_successful_login_resets_throttle(client: AsyncClient, throttled_app, signed_up, test_data):
    for _ in range(5):
        await client.post("/auth/login", json=test_data.get_copy("login_wrong_password"))
    assert (await client.post("/auth/login", json=test_data.get_copy("login"))).status_code == 302

    for _ in range(5):
        response = await client.post("/auth/login", json=test_data.get_copy("login_wrong_password"))
        assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_with_live_session_redirects(client: AsyncClient, verified, test_data):
    response = await client.post("/auth/login", json=test_data.get_copy("login"), headers=bearer(verified))

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert session_token_from(response) is None


@pytest.mark.asyncio
async def test_logout(client: AsyncClient, verified):
    response = await client.post("/auth/logout", headers=bearer(verified))

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    assert session_token_from(response) == ""

    session = await client.get("/auth/session", headers=bearer(verified))
    assert session.status_code == 401


@pytest.mark.asyncio
async def test_logout_keeps_other_sessions(client: AsyncClient, verified, test_data):
    other = session_token_from(await client.post("/auth/login", json=test_data.get_copy("login")))

    await client.post("/auth/logout", headers=bearer(verified))

    assert (await client.get("/auth/session", headers=bearer(other))).status_code == 200


@pytest.mark.asyncio
async def test_logout_without_session(client: AsyncClient):
    response = await client.post("/auth/logout")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"
