import asyncio

import pytest

from src.adapter.rate_limit.token_bucket import (
    ConstantRefillTokenBucketLimiter,
    FixedRefillTokenBucketLimiter,
)


@pytest.mark.asyncio
async def test_constant_refill_allows_max_then_refuses(redis, clock):
    bucket = ConstantRefillTokenBucketLimiter("resend", redis, max=3, refill_interval_seconds=10, clock=clock)

    results = [await bucket.check("user-1") for _ in range(4)]

    assert results == [True, True, True, False]


@pytest.mark.asyncio
async def test_constant_refill_adds_one_token_per_interval(redis, clock):
    bucket = ConstantRefillTokenBucketLimiter("resend", redis, max=3, refill_interval_seconds=10, clock=clock)
    for _ in range(3):
        assert await bucket.check("user-1") is True

    clock.advance(9)
    assert await bucket.check("user-1") is False

    clock.advance(1)
    assert await bucket.check("user-1") is True
    assert await bucket.check("user-1") is False


@pytest.mark.asyncio
async def test_constant_refill_never_exceeds_max(redis, clock):
    bucket = ConstantRefillTokenBucketLimiter("resend", redis, max=3, refill_interval_seconds=10, clock=clock)
    assert await bucket.check("user-1") is True

    clock.advance(3600)

    results = [await bucket.check("user-1") for _ in range(4)]
    assert results == [True, True, True, False]


@pytest.mark.asyncio
async def test_cost_larger_than_remaining_is_refused_without_spending(redis, clock):
    bucket = ConstantRefillTokenBucketLimiter("resend", redis, max=3, refill_interval_seconds=10, clock=clock)
    assert await bucket.check("user-1", cost=2) is True

    assert await bucket.check("user-1", cost=2) is False
    assert await bucket.check("user-1", cost=1) is True


@pytest.mark.asyncio
async def test_keys_are_independent(redis, clock):
    bucket = ConstantRefillTokenBucketLimiter("resend", redis, max=1, refill_interval_seconds=10, clock=clock)

    assert await bucket.check("user-1") is True
    assert await bucket.check("user-1") is False
    assert await bucket.check("user-2") is True


@pytest.mark.asyncio
async def test_buckets_with_different_names_do_not_share_state(redis, clock):
    resend = ConstantRefillTokenBucketLimiter("resend", redis, max=1, refill_interval_seconds=10, clock=clock)
    two_factor = ConstantRefillTokenBucketLimiter("two-factor", redis, max=1, refill_interval_seconds=10, clock=clock)

    assert await resend.check("user-1") is True
    assert await two_factor.check("user-1") is True
    assert await redis.hget("resend:user-1", "count") == "0"


@pytest.mark.asyncio
async def test_concurrent_checks_never_overspend(redis, clock):
    bucket = ConstantRefillTokenBucketLimiter("resend", redis, max=5, refill_interval_seconds=60, clock=clock)

    results = await asyncio.gather(*[bucket.check("user-1") for _ in range(20)])

    assert results.count(True) == 5


@pytest.mark.asyncio
async def test_fixed_refill_restores_full_window(redis, clock):
    bucket = FixedRefillTokenBucketLimiter("verify", redis, max=3, refill_interval_seconds=60, clock=clock)
    for _ in range(3):
        assert await bucket.check("user-1") is True
    assert await bucket.check("user-1") is False

    clock.advance(59)
    assert await bucket.check("user-1") is False

    clock.advance(1)
    results = [await bucket.check("user-1") for _ in range(4)]
    assert results == [True, True, True, False]


@pytest.mark.asyncio
async def test_fixed_refill_window_opens_on_first_request(redis, clock):
    bucket = FixedRefillTokenBucketLimiter("verify", redis, max=2, refill_interval_seconds=60, clock=clock)
    assert await bucket.check("user-1") is True

    clock.advance(30)
    assert await bucket.check("user-1") is True
    assert await bucket.check("user-1") is False

    # Window opened at the first request, not the last one
    clock.advance(30)
    assert await bucket.check("user-1") is True


@pytest.mark.asyncio
async def test_fixed_refill_key_expires_with_window(redis, clock):
    bucket = FixedRefillTokenBucketLimiter("verify", redis, max=3, refill_interval_seconds=60, clock=clock)
    await bucket.check("user-1")

    ttl = await redis.pttl("verify:user-1")

    assert 0 < ttl <= 60_000


@pytest.mark.asyncio
async def test_increment_refunds_up_to_max(redis, clock):
    bucket = ConstantRefillTokenBucketLimiter("resend", redis, max=3, refill_interval_seconds=10, clock=clock)
    await bucket.check("user-1")
    await bucket.check("user-1")

    assert await bucket.increment("user-1") == 2
    assert await bucket.increment("user-1", 5) == 3


@pytest.mark.asyncio
async def test_increment_on_unknown_key_reports_full_bucket(redis, clock):
    bucket = FixedRefillTokenBucketLimiter("verify", redis, max=3, refill_interval_seconds=60, clock=clock)

    assert await bucket.increment("nobody") == 3
    assert await redis.exists("verify:nobody") == 0


@pytest.mark.asyncio
async def test_reset_refills_the_bucket(redis, clock):
    bucket = FixedRefillTokenBucketLimiter("verify", redis, max=2, refill_interval_seconds=60, clock=clock)
    await bucket.check("user-1")
    await bucket.check("user-1")
    assert await bucket.check("user-1") is False

    await bucket.reset("user-1")

    assert await bucket.check("user-1") is True
