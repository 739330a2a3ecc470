"""Dual-horizon idempotency cache"""

import time
from typing import Callable, Dict, Generic, NamedTuple, Optional, TypeVar
import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class _Record(NamedTuple):
    value: object
    expires_at: float


class IdempotencyCache(Generic[T]):
    """
    Remembers the result of a keyed request on two horizons.

    Every ``set`` writes a short-lived record (replay window) and a
    long-lived one (so a key stays answerable for about a day). ``get``
    prefers the short record and falls back to the long one; expired
    records are evicted when read, and ``sweep`` evicts the rest.
    """

    def __init__(
        self,
        ttl_seconds: float = 60,
        persistent_ttl_seconds: float = 86_400,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.persistent_ttl_seconds = persistent_ttl_seconds
        self._clock = clock
        self._short: Dict[str, _Record] = {}
        self._long: Dict[str, _Record] = {}

    def get(self, key: str) -> Optional[T]:
        now = self._clock()
        for horizon in (self._short, self._long):
            record = horizon.get(key)
            if record is None:
                continue
            if record.expires_at > now:
                return record.value
            del horizon[key]
        return None

    def set(self, key: str, value: T) -> None:
        now = self._clock()
        self._short[key] = _Record(value, now + self.ttl_seconds)
        self._long[key] = _Record(value, now + self.persistent_ttl_seconds)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def sweep(self) -> int:
        """Evict expired records from both horizons"""
        now = self._clock()
        evicted = 0
        for horizon in (self._short, self._long):
            expired = [key for key, record in horizon.items() if record.expires_at <= now]
            for key in expired:
                del horizon[key]
            evicted += len(expired)
        if evicted:
            logger.debug("Idempotency cache swept", evicted=evicted)
        return evicted

    def clear(self) -> None:
        self._short.clear()
        self._long.clear()

    def __len__(self) -> int:
        return len(self._long.keys() | self._short.keys())
