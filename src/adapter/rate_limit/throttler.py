"""
Redis failure throttler.

State per key is a hash `{name}:{key}` with `failures`, `updated_at` and
`next_allowed` (milliseconds). The first `grace` failures cost nothing;
after that each failure waits the next entry of the timeout ladder,
holding at the last entry. Failures older than the cutoff are forgotten.
"""

import logging
from typing import Callable, List

from src.adapter.rate_limit.token_bucket import now_ms
from src.app.services.rate_limiter import RateLimiter
from src.domain.entities import ThrottleResetType

logger = logging.getLogger(__name__)

RECORD_FAILURE = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local grace = tonumber(ARGV[2])
local cutoff = tonumber(ARGV[3])
local amount = tonumber(ARGV[4])
local timeouts = {}
for i = 5, #ARGV do
    timeouts[#timeouts + 1] = tonumber(ARGV[i])
end

local fields = redis.call("HMGET", key, "failures", "updated_at")
local failures = 0
if fields[1] and now - tonumber(fields[2]) < cutoff then
    failures = tonumber(fields[1])
end
failures = failures + amount

local delay = 0
if failures > grace and #timeouts > 0 then
    delay = timeouts[math.min(failures - grace, #timeouts)]
end

redis.call(
    "HSET", key,
    "failures", failures,
    "updated_at", now,
    "next_allowed", now + delay * 1000
)
redis.call("PEXPIRE", key, cutoff)
return delay
"""

DECAY = """
local key = KEYS[1]
local failures = redis.call("HGET", key, "failures")
if not failures then
    return 0
end
failures = tonumber(failures) - 1
if failures <= 0 then
    redis.call("DEL", key)
    return 0
end
redis.call("HSET", key, "failures", failures, "next_allowed", 0)
return failures
"""


class Throttler(RateLimiter):
    """
    Progressive delay after repeated failures for a key.

    check() never mutates; callers record a failure with increment() and
    forgive with reset() after a success.
    """

    def __init__(
        self,
        name: str,
        storage,
        timeout_seconds: List[int],
        grace: int = 0,
        cutoff_seconds: int = 24 * 60 * 60,
        reset_type: ThrottleResetType = ThrottleResetType.instant,
        clock: Callable[[], int] = now_ms,
    ):
        self.name = name
        self.storage = storage
        self.timeout_seconds = list(timeout_seconds)
        self.grace = grace
        self.cutoff_ms = int(cutoff_seconds * 1000)
        self.reset_type = reset_type
        self.clock = clock
        self._record_failure = storage.register_script(RECORD_FAILURE)
        self._decay = storage.register_script(DECAY)

    def _key(self, key: str) -> str:
        return f"{self.name}:{key}"

    async def check(self, key: str, cost: int = 1) -> bool:
        next_allowed = await self.storage.hget(self._key(key), "next_allowed")
        if next_allowed is None:
            return True
        return self.clock() >= int(next_allowed)

    async def increment(self, key: str, amount: int = 1) -> int:
        """Record a failure; returns the wait in seconds before the next attempt"""
        delay = await self._record_failure(
            keys=[self._key(key)],
            args=[self.clock(), self.grace, self.cutoff_ms, amount, *self.timeout_seconds],
        )
        if delay:
            logger.warning(f"Throttling {self.name} for {delay}s")
        return int(delay)

    async def reset(self, key: str) -> None:
        if self.reset_type == ThrottleResetType.instant:
            await self.storage.delete(self._key(key))
        else:
            await self._decay(keys=[self._key(key)])
