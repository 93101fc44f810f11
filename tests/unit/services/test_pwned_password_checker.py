import hashlib

import httpx
import pytest

from src.adapter.services.pwned_password_checker import PwnedPasswordChecker

BASE_URL = "https://api.pwnedpasswords.test/range/"


def sha1_parts(password: str):
    digest = hashlib.sha1(password.encode()).hexdigest().upper()
    return digest[:5], digest[5:]


def make_checker(handler, enabled: bool = True) -> PwnedPasswordChecker:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PwnedPasswordChecker(client, BASE_URL, enabled=enabled)


@pytest.mark.asyncio
async def test_breached_password_is_weak():
    prefix, suffix = sha1_parts("password123")
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, text=f"0000000000000000000000000000000000A:3\r\n{suffix}:42\r\n")

    checker = make_checker(handler)

    assert await checker.is_strong("password123") is False
    assert str(requests[0].url) == f"{BASE_URL}{prefix}"
    assert requests[0].headers["Add-Padding"] == "true"


@pytest.mark.asyncio
async def test_padding_entries_with_zero_count_are_ignored():
    _, suffix = sha1_parts("unusual-passphrase-91")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=f"{suffix}:0\r\n")

    checker = make_checker(handler)

    assert await checker.is_strong("unusual-passphrase-91") is True


@pytest.mark.asyncio
async def test_short_password_is_weak_without_lookup():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no lookup expected")

    checker = make_checker(handler)

    assert await checker.is_strong("short") is False


@pytest.mark.asyncio
async def test_lookup_failure_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    checker = make_checker(handler)

    with pytest.raises(httpx.HTTPStatusError):
        await checker.is_strong("SecurePass123!")


@pytest.mark.asyncio
async def test_disabled_lookup_only_checks_length():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no lookup expected")

    checker = make_checker(handler, enabled=False)

    assert await checker.is_strong("SecurePass123!") is True
