"""Keyed async mutex used to serialize conflicting booking commits"""

import asyncio
import threading
import time
from collections import deque
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Callable, Deque, Dict, Iterable, Optional
import structlog

logger = structlog.get_logger()

DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0


def build_lock_key(
    restaurant_id: str,
    sector_id: str,
    table_ids: Iterable[str],
    start: datetime,
) -> str:
    """Lock identity for a commit: same tables at the same instant collide"""
    tables_key = "+".join(sorted(table_ids))
    return f"{restaurant_id}|{sector_id}|{tables_key}|{start.isoformat()}"


class _LockEntry:
    __slots__ = ("locked", "waiters", "granted_at", "generation")

    def __init__(self, now: float):
        self.locked = False
        self.waiters: Deque[asyncio.Future] = deque()
        self.granted_at = now
        self.generation = 0


class LockHandle:
    """Proof of ownership for one grant; releasing twice is harmless"""

    def __init__(self, manager: "LockManager", key: str, generation: int):
        self._manager = manager
        self.key = key
        self.generation = generation
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._manager._release(self.key, self.generation)

    __call__ = release


class LockManager:
    """
    Per-key mutex with FIFO hand-off and stale holder reclamation.

    A holder that keeps the lock longer than ``timeout_seconds`` is treated
    as abandoned: the next acquire clears it, wakes the queued waiters so
    they re-queue behind the new holder, and proceeds. This only keeps the
    system live when a holder never releases; the overlap re-check done
    under the lock is what guarantees no double booking.

    The key table is guarded by a threading lock. Grants are delivered to
    waiters on their own event loop.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.timeout_seconds = timeout_seconds
        self._clock = clock
        self._entries: Dict[str, _LockEntry] = {}
        self._table_lock = threading.Lock()

    async def acquire(self, key: str) -> LockHandle:
        """Wait until the caller is the sole holder of ``key``"""
        loop = asyncio.get_running_loop()
        while True:
            with self._table_lock:
                entry = self._entries.get(key)
                if entry is None:
                    entry = self._entries[key] = _LockEntry(self._clock())
                if entry.locked and self._is_stale(entry):
                    self._reclaim(key, entry)
                if not entry.locked:
                    return self._grant(key, entry)
                waiter = loop.create_future()
                entry.waiters.append(waiter)

            try:
                generation = await waiter
            except asyncio.CancelledError:
                with self._table_lock:
                    if waiter in entry.waiters:
                        entry.waiters.remove(waiter)
                raise

            if generation is not None:
                return LockHandle(self, key, generation)
            # Queue was cleared by a stale reclamation; try again

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[LockHandle]:
        handle = await self.acquire(key)
        try:
            yield handle
        finally:
            handle.release()

    def waiting_count(self, key: str) -> int:
        """Number of contenders currently queued behind the holder of ``key``"""
        with self._table_lock:
            entry = self._entries.get(key)
            if entry is None:
                return 0
            return sum(1 for waiter in entry.waiters if not waiter.done())

    def is_locked(self, key: str) -> bool:
        with self._table_lock:
            entry = self._entries.get(key)
            return bool(entry and entry.locked)

    def __len__(self) -> int:
        return len(self._entries)

    def sweep(self) -> int:
        """Drop idle entries and reclaim stale ones; returns entries removed"""
        removed = 0
        with self._table_lock:
            for key, entry in list(self._entries.items()):
                if entry.locked and self._is_stale(entry):
                    self._reclaim(key, entry)
                if not entry.locked and not entry.waiters:
                    del self._entries[key]
                    removed += 1
        if removed:
            logger.debug("Lock table swept", removed=removed, remaining=len(self._entries))
        return removed

    def clear(self) -> None:
        with self._table_lock:
            for entry in self._entries.values():
                self._wake_all(entry)
            self._entries.clear()

    # Internals, called with the table lock held unless noted

    def _is_stale(self, entry: _LockEntry) -> bool:
        return self._clock() - entry.granted_at > self.timeout_seconds

    def _grant(self, key: str, entry: _LockEntry) -> LockHandle:
        entry.locked = True
        entry.generation += 1
        entry.granted_at = self._clock()
        return LockHandle(self, key, entry.generation)

    def _reclaim(self, key: str, entry: _LockEntry) -> None:
        logger.warning(
            "Stale lock recovered",
            key=key,
            held_for_seconds=round(self._clock() - entry.granted_at, 3),
            dropped_waiters=len(entry.waiters),
        )
        entry.locked = False
        entry.generation += 1
        self._wake_all(entry)

    def _wake_all(self, entry: _LockEntry) -> None:
        waiters = list(entry.waiters)
        entry.waiters.clear()
        for waiter in waiters:
            if not waiter.done():
                waiter.get_loop().call_soon_threadsafe(self._deliver, None, waiter, None)

    def _release(self, key: str, generation: int) -> None:
        """Called without the table lock"""
        with self._table_lock:
            entry = self._entries.get(key)
            if entry is None or not entry.locked or entry.generation != generation:
                # Grant was reclaimed or already released
                return
            self._hand_off(key, entry)

    def _hand_off(self, key: str, entry: _LockEntry) -> None:
        while entry.waiters:
            waiter = entry.waiters.popleft()
            if waiter.done():
                continue
            entry.generation += 1
            entry.granted_at = self._clock()
            waiter.get_loop().call_soon_threadsafe(self._deliver, key, waiter, entry.generation)
            return
        entry.locked = False
        entry.granted_at = self._clock()

    def _deliver(self, key: Optional[str], waiter: asyncio.Future, generation: Optional[int]) -> None:
        """Runs on the waiter's loop, without the table lock"""
        if not waiter.done():
            waiter.set_result(generation)
        elif key is not None and generation is not None:
            # Waiter went away after being chosen; pass the lock on
            self._release(key, generation)
