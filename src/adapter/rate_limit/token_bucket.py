"""
Redis token bucket limiters.

Each bucket is a hash `{name}:{key}` holding `count` and `refilled_at`
(milliseconds). The read, refill and debit happen inside one Lua script so
concurrent requests against the same key cannot both spend the last token.
The caller's clock is passed into the script; Redis time is never read.
"""

import logging
import time
from typing import Callable

from src.app.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


CONSTANT_REFILL_CONSUME = """
local key = KEYS[1]
local max = tonumber(ARGV[1])
local interval = tonumber(ARGV[2])
local cost = tonumber(ARGV[3])
local now = tonumber(ARGV[4])

local fields = redis.call("HMGET", key, "count", "refilled_at")
local count = max
local refilled_at = now
if fields[1] then
    local last = tonumber(fields[2])
    local refill = math.floor((now - last) / interval)
    count = math.min(max, tonumber(fields[1]) + refill)
    refilled_at = last + refill * interval
    if count == max then
        refilled_at = now
    end
end

if count < cost then
    return 0
end

count = count - cost
redis.call("HSET", key, "count", count, "refilled_at", refilled_at)
redis.call("PEXPIRE", key, max * interval)
return 1
"""

FIXED_REFILL_CONSUME = """
local key = KEYS[1]
local max = tonumber(ARGV[1])
local interval = tonumber(ARGV[2])
local cost = tonumber(ARGV[3])
local now = tonumber(ARGV[4])

local fields = redis.call("HMGET", key, "count", "refilled_at")
local count = max
local refilled_at = now
if fields[1] then
    local opened = tonumber(fields[2])
    if now - opened < interval then
        count = tonumber(fields[1])
        refilled_at = opened
    end
end

if count < cost then
    return 0
end

count = count - cost
redis.call("HSET", key, "count", count, "refilled_at", refilled_at)
redis.call("PEXPIRE", key, refilled_at + interval - now)
return 1
"""

REFUND = """
local key = KEYS[1]
local max = tonumber(ARGV[1])
local amount = tonumber(ARGV[2])

local count = redis.call("HGET", key, "count")
if not count then
    return max
end
count = math.min(max, tonumber(count) + amount)
redis.call("HSET", key, "count", count)
return count
"""


class _RedisTokenBucketLimiter(RateLimiter):
    consume_script = ""

    def __init__(
        self,
        name: str,
        storage,
        max: int,
        refill_interval_seconds: int,
        clock: Callable[[], int] = now_ms,
    ):
        self.name = name
        self.storage = storage
        self.max = max
        self.refill_interval_ms = int(refill_interval_seconds * 1000)
        self.clock = clock
        self._consume = storage.register_script(self.consume_script)
        self._refund = storage.register_script(REFUND)

    def _key(self, key: str) -> str:
        return f"{self.name}:{key}"

    async def check(self, key: str, cost: int = 1) -> bool:
        allowed = await self._consume(
            keys=[self._key(key)],
            args=[self.max, self.refill_interval_ms, cost, self.clock()],
        )
        if not allowed:
            logger.info(f"Rate limit reached: {self.name}")
        return bool(allowed)

    async def increment(self, key: str, amount: int = 1) -> int:
        return int(await self._refund(keys=[self._key(key)], args=[self.max, amount]))

    async def reset(self, key: str) -> None:
        await self.storage.delete(self._key(key))


class ConstantRefillTokenBucketLimiter(_RedisTokenBucketLimiter):
    """
    One token is added every refill interval, up to max.

    A fresh key starts full, so max requests pass immediately and the
    next one is refused until an interval has elapsed.
    """

    consume_script = CONSTANT_REFILL_CONSUME


class FixedRefillTokenBucketLimiter(_RedisTokenBucketLimiter):
    """
    The bucket is refilled to max once a full interval has passed since
    the window opened. The key expires with the window.
    """

    consume_script = FIXED_REFILL_CONSUME
