"""Tests for the waitlist promoter"""

from datetime import timedelta

import pytest

from conftest import RESTAURANT_ID, SECTOR_ID, at

from seatwise.exceptions import CapacityConflictError, NotFoundError
from seatwise.models import Blackout, BookingStatus, WaitlistStatus, utcnow
from seatwise.schemas.booking import BookingCreate
from seatwise.schemas.waitlist import WaitlistEntryCreate


def entry_request(party_size=4, desired="10:00", **overrides):
    values = dict(
        restaurant_id=RESTAURANT_ID,
        sector_id=SECTOR_ID,
        party_size=party_size,
        desired_time=at(desired),
        customer_name="Jamie Doe",
    )
    values.update(overrides)
    return WaitlistEntryCreate(**values)


async def fill_sector(state):
    """Only the 10:00-11:30 seating is open; seat parties of four on T2 and T3"""
    state.store.upsert_blackout(
        Blackout(restaurant_id=RESTAURANT_ID, sector_id=SECTOR_ID, start=at("11:30"), end=at("22:00"))
    )
    seated = []
    for name in ("First", "Second"):
        seated.append(
            await state.bookings.create_booking(
                BookingCreate(
                    restaurant_id=RESTAURANT_ID,
                    sector_id=SECTOR_ID,
                    party_size=4,
                    start=at("10:00"),
                    customer_name=name,
                )
            )
        )
    return seated


def test_enqueue_defaults(state):
    entry = state.waitlist.enqueue(entry_request(party_size=3))

    assert entry.status == WaitlistStatus.WAITING
    assert entry.priority == 3
    assert entry.expires_at - entry.requested_at == timedelta(hours=1)
    assert state.waitlist.list(SECTOR_ID) == [entry]


def test_explicit_priority_orders_queue(state):
    low = state.waitlist.enqueue(entry_request(party_size=6, priority=1))
    high = state.waitlist.enqueue(entry_request(party_size=2, priority=9))

    assert [e.id for e in state.waitlist.list(SECTOR_ID)] == [high.id, low.id]


@pytest.mark.asyncio
async def test_cancellation_promotes_waiting_party(state):
    first, second = await fill_sector(state)
    assert first.table_ids == ["T2"]
    assert second.table_ids == ["T3"]

    entry = state.waitlist.enqueue(entry_request())
    summary = await state.waitlist.process_queue(RESTAURANT_ID, SECTOR_ID)
    assert summary.waiting == 1
    assert summary.promoted == 0
    assert entry.status == WaitlistStatus.WAITING

    await state.bookings.cancel_booking(first.id)

    assert entry.status == WaitlistStatus.PROMOTED
    assert state.waitlist.list(SECTOR_ID) == []
    promoted = state.store.get_booking(entry.booking_id)
    assert promoted.status == BookingStatus.CONFIRMED
    assert promoted.table_ids == ["T2"]
    assert promoted.start == at("10:00")
    assert promoted.customer_name == "Jamie Doe"


@pytest.mark.asyncio
async def test_expired_entries_are_dropped(state):
    entry = state.waitlist.enqueue(entry_request(), now=utcnow() - timedelta(hours=2))

    summary = await state.waitlist.process_queue(RESTAURANT_ID, SECTOR_ID)

    assert summary.expired == 1
    assert entry.status == WaitlistStatus.EXPIRED
    assert state.waitlist.list(SECTOR_ID) == []


@pytest.mark.asyncio
async def test_other_restaurants_are_skipped(state):
    foreign = state.waitlist.enqueue(entry_request(restaurant_id="R2"))

    summary = await state.waitlist.process_queue(RESTAURANT_ID, SECTOR_ID)

    assert summary == type(summary)()
    assert foreign.status == WaitlistStatus.WAITING


@pytest.mark.asyncio
async def test_process_all_visits_every_queue(state):
    await fill_sector(state)
    state.waitlist.enqueue(entry_request(party_size=2))
    state.waitlist.enqueue(entry_request(party_size=4))

    summary = await state.waitlist.process_all()

    # T1 is still free for the couple; the party of four keeps waiting
    assert summary.promoted == 1
    assert summary.waiting == 1


@pytest.mark.asyncio
async def test_unexpected_errors_propagate(state, monkeypatch):
    state.waitlist.enqueue(entry_request())

    async def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(state.bookings, "create_booking", broken)
    with pytest.raises(RuntimeError):
        await state.waitlist.process_queue(RESTAURANT_ID, SECTOR_ID)


@pytest.mark.asyncio
async def test_conflicts_leave_entry_waiting(state, monkeypatch):
    entry = state.waitlist.enqueue(entry_request())

    async def taken(*args, **kwargs):
        raise CapacityConflictError("Slot already taken")

    monkeypatch.setattr(state.bookings, "create_booking", taken)
    summary = await state.waitlist.process_queue(RESTAURANT_ID, SECTOR_ID)

    assert summary.waiting == 1
    assert entry.status == WaitlistStatus.WAITING


def test_expire_entry(state):
    entry = state.waitlist.enqueue(entry_request())

    assert state.waitlist.expire_entry(entry.id).status == WaitlistStatus.EXPIRED
    with pytest.raises(NotFoundError):
        state.waitlist.expire_entry(entry.id)
