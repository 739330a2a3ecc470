"""Process-resident state: entity store, commit locks, idempotency cache"""

from seatwise.store.memory import InMemoryStore
from seatwise.store.locking import LockManager, LockHandle, build_lock_key
from seatwise.store.idempotency import IdempotencyCache

__all__ = [
    "InMemoryStore",
    "LockManager",
    "LockHandle",
    "build_lock_key",
    "IdempotencyCache",
]
