"""Tests for the idempotency cache"""

from seatwise.store.idempotency import IdempotencyCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_value_replayed_within_window():
    cache = IdempotencyCache(ttl_seconds=60, persistent_ttl_seconds=3600, clock=FakeClock())
    cache.set("key", "booking-1")
    assert cache.get("key") == "booking-1"
    assert cache.has("key")
    assert cache.get("other") is None


def test_long_horizon_outlives_short_one():
    clock = FakeClock()
    cache = IdempotencyCache(ttl_seconds=60, persistent_ttl_seconds=3600, clock=clock)
    cache.set("key", "booking-1")

    clock.now = 120
    assert cache.get("key") == "booking-1"

    clock.now = 3601
    assert cache.get("key") is None
    assert len(cache) == 0


def test_sweep_evicts_expired_records():
    clock = FakeClock()
    cache = IdempotencyCache(ttl_seconds=60, persistent_ttl_seconds=3600, clock=clock)
    cache.set("a", 1)
    cache.set("b", 2)

    clock.now = 61
    assert cache.sweep() == 2
    assert len(cache) == 2

    clock.now = 3601
    assert cache.sweep() == 2
    assert len(cache) == 0


def test_clear():
    cache = IdempotencyCache()
    cache.set("a", 1)
    cache.clear()
    assert cache.get("a") is None
