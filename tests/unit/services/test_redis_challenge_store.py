import pytest

from src.adapter.services.redis_challenge_store import RedisPasskeyChallengeStore


@pytest.mark.asyncio
async def test_challenge_is_single_use(redis):
    store = RedisPasskeyChallengeStore(redis)
    challenge = await store.create()

    assert await store.consume(challenge) == challenge
    assert await store.consume(challenge) is None


@pytest.mark.asyncio
async def test_unknown_challenge_is_rejected(redis):
    store = RedisPasskeyChallengeStore(redis)

    assert await store.consume("never-issued") is None


@pytest.mark.asyncio
async def test_challenge_expires(redis):
    store = RedisPasskeyChallengeStore(redis, expires_seconds=300)
    challenge = await store.create()

    ttl = await redis.ttl(f"passkey-challenge:{challenge}")

    assert 0 < ttl <= 300
    assert len(challenge) == 43
