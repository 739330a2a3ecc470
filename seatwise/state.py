"""
Process-wide service container and its FastAPI dependency
"""

from functools import lru_cache
from typing import Optional

from seatwise.config import Settings, get_settings
from seatwise.engine.capacity import CapacityStrategyRouter
from seatwise.engine.discovery import DiscoveryEngine
from seatwise.engine.gaps import GapFinder
from seatwise.engine.repack import RepackOptimizer
from seatwise.services.booking import BookingService
from seatwise.services.catalog import CatalogService
from seatwise.services.waitlist import WaitlistService
from seatwise.store.idempotency import IdempotencyCache
from seatwise.store.locking import LockManager
from seatwise.store.memory import InMemoryStore


class AppState:
    """Owns the store, caches, engine and services for one process"""

    def __init__(self, settings: Optional[Settings] = None, store: Optional[InMemoryStore] = None):
        self.settings = settings or get_settings()
        self.store = store or InMemoryStore()

        self.router = CapacityStrategyRouter(self.settings.capacity_strategy)
        self.gap_finder = GapFinder(self.store)
        self.discovery = DiscoveryEngine(
            self.store,
            self.router,
            gap_finder=self.gap_finder,
            max_tables_per_combo=self.settings.max_tables_per_combo,
            durations_by_party_size=self.settings.durations_by_party_size,
            default_duration_minutes=self.settings.default_duration_minutes,
        )
        self.repack = RepackOptimizer(self.store, self.router, gap_finder=self.gap_finder)
        self.locks = LockManager(timeout_seconds=self.settings.lock_timeout_seconds)
        self.idempotency = IdempotencyCache(
            ttl_seconds=self.settings.idempotency_ttl_seconds,
            persistent_ttl_seconds=self.settings.idempotency_persistent_ttl_seconds,
        )

        self.bookings = BookingService(
            self.store,
            self.discovery,
            self.locks,
            self.idempotency,
            self.repack,
            large_group_threshold=self.settings.large_group_threshold,
            approval_ttl_seconds=self.settings.approval_ttl_seconds,
        )
        self.waitlist = WaitlistService(
            self.store,
            self.bookings,
            ttl_seconds=self.settings.waitlist_ttl_seconds,
        )
        # Released capacity goes to the waitlist first
        self.bookings.on_capacity_freed = self.waitlist.trigger_promotion

        self.catalog = CatalogService(self.store, self.router, self.idempotency, self.locks)


@lru_cache()
def get_state() -> AppState:
    """Get the process-wide state (FastAPI dependency)"""
    return AppState()
