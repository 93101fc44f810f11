import pyotp
import pytest
from httpx import AsyncClient

from tests.utils.fakes import bearer, session_token_from


async def enable_two_factor(client: AsyncClient, token: str) -> str:
    setup = await client.get("/auth/2fa/setup", headers=bearer(token))
    assert setup.status_code == 200
    secret = setup.json()["secret"]
    assert setup.json()["uri"].startswith("otpauth://totp/")

    response = await client.post(
        "/auth/2fa/setup", json={"secret": secret, "code": pyotp.TOTP(secret).now()}, headers=bearer(token)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "enabled"
    return secret


@pytest.mark.asyncio
async def test_enable_then_login_requires_second_factor(client: AsyncClient, verified, test_data):
    secret = await enable_two_factor(client, verified)

    session = await client.get("/auth/session", headers=bearer(verified))
    assert session.json()["has_two_factor"] is True
    assert session.json()["next_step"] == "complete"

    login = await client.post("/auth/login", json=test_data.get_copy("login"))
    assert login.status_code == 302
    assert login.headers["location"] == "/auth/2fa/otp"
    token = session_token_from(login)
    assert (await client.get("/auth/session", headers=bearer(token))).json()["next_step"] == "two_factor"

    response = await client.post("/auth/2fa/otp", json={"code": pyotp.TOTP(secret).now()}, headers=bearer(token))
    assert response.status_code == 302
    assert response.headers["location"] == "/"

    session = await client.get("/auth/session", headers=bearer(token))
    assert session.json()["is_two_factor_verified"] is True
    assert session.json()["next_step"] == "complete"


@pytest.mark.asyncio
async def test_wrong_second_factor_code(client: AsyncClient, verified, test_data):
    await enable_two_factor(client, verified)
    token = session_token_from(await client.post("/auth/login", json=test_data.get_copy("login")))

    response = await client.post("/auth/2fa/otp", json={"code": "abcdef"}, headers=bearer(token))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_CODE"


@pytest.mark.asyncio
async def test_second_factor_attempts_are_limited(client: AsyncClient, verified, test_data):
    secret = await enable_two_factor(client, verified)
    token = session_token_from(await client.post("/auth/login", json=test_data.get_copy("login")))

    for _ in range(5):
        await client.post("/auth/2fa/otp", json={"code": "abcdef"}, headers=bearer(token))

    response = await client.post("/auth/2fa/otp", json={"code": pyotp.TOTP(secret).now()}, headers=bearer(token))
    assert response.status_code == 429


@pytest.mark.asyncio
async def test_setup_requires_verified_email(client: AsyncClient, signed_up):
    token, _ = signed_up

    response = await client.get("/auth/2fa/setup", headers=bearer(token))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "SESSION_NOT_TRUSTED"


@pytest.mark.asyncio
async def test_setup_twice_is_rejected(client: AsyncClient, verified):
    await enable_two_factor(client, verified)

    response = await client.get("/auth/2fa/setup", headers=bearer(verified))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TWO_FACTOR_ALREADY_ENABLED"


@pytest.mark.asyncio
async def test_otp_without_two_factor(client: AsyncClient, verified):
    response = await client.post("/auth/2fa/otp", json={"code": "123456"}, headers=bearer(verified))

    # A complete session has nothing left to verify
    assert response.status_code == 302
    assert response.headers["location"] == "/"
