"""Test configuration and fixtures"""

from datetime import date, datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from seatwise.config import Settings
from seatwise.main import app
from seatwise.models import Booking, BookingStatus, Restaurant, Sector, ServiceWindow, Table
from seatwise.state import AppState, get_state

RESTAURANT_ID = "R1"
SECTOR_ID = "S1"
# A Wednesday
DAY = date(2025, 10, 22)


def at(hhmm: str, day: date = DAY) -> datetime:
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hours, minutes, tzinfo=timezone.utc)


def make_booking(table_ids, start: str, end: str, party_size: int = 2, **kwargs) -> Booking:
    start_at, end_at = at(start), at(end)
    return Booking(
        restaurant_id=kwargs.pop("restaurant_id", RESTAURANT_ID),
        sector_id=kwargs.pop("sector_id", SECTOR_ID),
        table_ids=list(table_ids),
        party_size=party_size,
        start=start_at,
        end=end_at,
        status=kwargs.pop("status", BookingStatus.CONFIRMED),
        duration_minutes=int((end_at - start_at) / timedelta(minutes=1)),
        **kwargs,
    )


def seed_demo_sector(store) -> None:
    """T1 (2-2) <-> T2 (2-4) <-> T3 (4-6), open 10:00-22:00 every day"""
    store.upsert_restaurant(
        Restaurant(
            id=RESTAURANT_ID,
            name="Test Bistro",
            service_windows={
                day: [ServiceWindow(start_time="10:00", end_time="22:00")] for day in range(7)
            },
        )
    )
    store.upsert_sector(Sector(id=SECTOR_ID, restaurant_id=RESTAURANT_ID, name="Main"))
    for table_id, low, high, peers in (
        ("T1", 2, 2, ["T2"]),
        ("T2", 2, 4, ["T1", "T3"]),
        ("T3", 4, 6, ["T2"]),
    ):
        store.upsert_table(
            Table(
                id=table_id,
                restaurant_id=RESTAURANT_ID,
                sector_id=SECTOR_ID,
                label=table_id,
                min_capacity=low,
                max_capacity=high,
                combinable_with=peers,
            )
        )


@pytest.fixture
def test_settings():
    return Settings(scheduler_enabled=False)


@pytest.fixture
def state(test_settings):
    """Fresh application state with the demo sector"""
    app_state = AppState(settings=test_settings)
    seed_demo_sector(app_state.store)
    return app_state


@pytest.fixture
def store(state):
    return state.store


@pytest.fixture
async def client(state):
    """Create test client with overridden application state"""
    app.dependency_overrides[get_state] = lambda: state

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
