"""Tests for the in-memory store and its indices"""

from datetime import timedelta

from conftest import DAY, SECTOR_ID, at, make_booking

from seatwise.models import Blackout, WaitlistEntry


def test_booking_indexed_by_sector_and_table(store):
    booking = make_booking(["T1", "T2"], "12:00", "13:30", party_size=4)
    store.upsert_booking(booking)

    assert [b.id for b in store.list_bookings_by_sector_date(SECTOR_ID, DAY)] == [booking.id]
    assert [b.id for b in store.list_bookings_by_table_date("T1", DAY)] == [booking.id]
    assert [b.id for b in store.list_bookings_by_table_date("T2", at("18:00"))] == [booking.id]
    assert store.list_bookings_by_table_date("T3", DAY) == []


def test_in_place_edit_reindexes(store):
    booking = make_booking(["T3"], "12:00", "13:00")
    store.upsert_booking(booking)

    booking.table_ids = ["T1"]
    store.upsert_booking(booking)

    assert store.list_bookings_by_table_date("T3", DAY) == []
    assert [b.id for b in store.list_bookings_by_table_date("T1", DAY)] == [booking.id]


def test_day_listing_sorted_by_start(store):
    late = make_booking(["T1"], "19:00", "20:00")
    early = make_booking(["T2"], "11:00", "12:00")
    store.upsert_booking(late)
    store.upsert_booking(early)

    assert [b.id for b in store.list_bookings_by_sector_date(SECTOR_ID, DAY)] == [early.id, late.id]


def test_remove_booking_drops_index_entries(store):
    booking = make_booking(["T1"], "12:00", "13:00")
    store.upsert_booking(booking)

    assert store.remove_booking(booking.id) is booking
    assert store.get_booking(booking.id) is None
    assert store.list_bookings_by_sector_date(SECTOR_ID, DAY) == []
    assert store.remove_booking(booking.id) is None


def test_blackout_indices(store):
    sector_wide = Blackout(restaurant_id="R1", sector_id=SECTOR_ID, start=at("15:00"), end=at("16:00"))
    table_only = Blackout(restaurant_id="R1", table_id="T2", start=at("17:00"), end=at("18:00"))
    store.upsert_blackout(sector_wide)
    store.upsert_blackout(table_only)

    assert [b.id for b in store.list_blackouts_by_sector_date(SECTOR_ID, DAY)] == [sector_wide.id]
    assert [b.id for b in store.list_blackouts_by_table_date("T2", DAY)] == [table_only.id]

    store.remove_blackout(table_only.id)
    assert store.list_blackouts_by_table_date("T2", DAY) == []


def test_blackout_filed_under_every_day_it_covers(store):
    blackout = Blackout(
        restaurant_id="R1",
        sector_id=SECTOR_ID,
        table_id="T3",
        start=at("22:00", DAY - timedelta(days=1)),
        end=at("00:00", DAY + timedelta(days=2)),
    )
    store.upsert_blackout(blackout)

    for day in (DAY - timedelta(days=1), DAY, DAY + timedelta(days=1)):
        assert [b.id for b in store.list_blackouts_by_sector_date(SECTOR_ID, day)] == [blackout.id]
        assert [b.id for b in store.list_blackouts_by_table_date("T3", day)] == [blackout.id]
    assert store.list_blackouts_by_sector_date(SECTOR_ID, DAY + timedelta(days=2)) == []

    store.remove_blackout(blackout.id)
    for day in (DAY - timedelta(days=1), DAY, DAY + timedelta(days=1)):
        assert store.list_blackouts_by_sector_date(SECTOR_ID, day) == []
        assert store.list_blackouts_by_table_date("T3", day) == []


def test_waitlist_ordered_by_priority_then_request_time(store):
    first = WaitlistEntry(
        restaurant_id="R1", sector_id=SECTOR_ID, party_size=2, priority=2,
        requested_at=at("10:00"), expires_at=at("11:00"),
    )
    urgent = WaitlistEntry(
        restaurant_id="R1", sector_id=SECTOR_ID, party_size=6, priority=6,
        requested_at=at("10:05"), expires_at=at("11:05"),
    )
    second = WaitlistEntry(
        restaurant_id="R1", sector_id=SECTOR_ID, party_size=2, priority=2,
        requested_at=at("10:10"), expires_at=at("11:10"),
    )
    for entry in (second, first, urgent):
        store.upsert_waitlist_entry(entry)

    assert [e.id for e in store.list_waitlist_by_sector(SECTOR_ID)] == [urgent.id, first.id, second.id]

    store.remove_waitlist_entry(urgent.id)
    assert [e.id for e in store.list_waitlist_by_sector(SECTOR_ID)] == [first.id, second.id]


def test_unknown_table_ids_skipped(store):
    assert [t.id for t in store.list_tables_by_ids(["T1", "nope", "T3"])] == ["T1", "T3"]


def test_clear(store):
    store.upsert_booking(make_booking(["T1"], "12:00", "13:00"))
    store.clear()

    assert store.list_restaurants() == []
    assert store.list_tables() == []
    assert store.list_bookings_by_sector_date(SECTOR_ID, DAY) == []
