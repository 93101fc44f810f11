from abc import ABC, abstractmethod


class RateLimiter(ABC):
    """
    Counter-store backed limiter interface - application layer.

    Implementations keep all state in the shared counter store so every
    replica of the service sees the same counts. Any store failure is
    raised to the caller; a limiter never reports "allowed" because the
    store was unreachable.
    """

    @abstractmethod
    async def check(self, key: str, cost: int = 1) -> bool:
        """Return True if the action identified by key may proceed"""
        pass

    @abstractmethod
    async def increment(self, key: str, amount: int = 1) -> int:
        """Record work against key (refund for buckets, failure for throttlers)"""
        pass

    @abstractmethod
    async def reset(self, key: str) -> None:
        """Forget the state held for key"""
        pass
