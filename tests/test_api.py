"""Tests for the HTTP API"""

import pytest
from httpx import AsyncClient

from conftest import DAY, RESTAURANT_ID, SECTOR_ID, at, make_booking

BOOKING = {
    "restaurant_id": RESTAURANT_ID,
    "sector_id": SECTOR_ID,
    "party_size": 4,
    "start": at("10:00").isoformat(),
    "customer_name": "Alex Johnson",
    "notes": "Prefer window seating",
}


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_discover(client: AsyncClient):
    response = await client.get(
        "/woki/discover",
        params={
            "restaurant_id": RESTAURANT_ID,
            "sector_id": SECTOR_ID,
            "party_size": 4,
            "date": DAY.isoformat(),
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "success"
    assert data["candidate"]["table_ids"] == ["T2"]
    assert data["candidate"]["capacity"] == {"min": 2, "max": 4}


@pytest.mark.asyncio
async def test_discover_no_capacity(client: AsyncClient):
    response = await client.get(
        "/woki/discover",
        params={"restaurant_id": "nope", "sector_id": SECTOR_ID, "party_size": 2, "date": DAY.isoformat()},
    )

    assert response.status_code == 200
    assert response.json() == {"outcome": "no_capacity", "candidate": None, "reason": "restaurant_not_found"}


@pytest.mark.asyncio
async def test_booking_lifecycle(client: AsyncClient):
    response = await client.post("/woki/bookings", json=BOOKING)
    assert response.status_code == 201
    booking = response.json()
    assert booking["status"] == "CONFIRMED"
    assert booking["table_ids"] == ["T2"]

    response = await client.get(f"/woki/bookings/{booking['id']}")
    assert response.status_code == 200

    response = await client.get(
        "/woki/bookings/day",
        params={"restaurant_id": RESTAURANT_ID, "sector_id": SECTOR_ID, "date": DAY.isoformat()},
    )
    assert [b["id"] for b in response.json()] == [booking["id"]]

    response = await client.delete(f"/woki/bookings/{booking['id']}")
    assert response.status_code == 204

    response = await client.delete(f"/woki/bookings/{booking['id']}")
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_idempotency_header(client: AsyncClient):
    headers = {"Idempotency-Key": "req-1"}
    first = await client.post("/woki/bookings", json=BOOKING, headers=headers)
    second = await client.post("/woki/bookings", json=BOOKING, headers=headers)

    assert first.status_code == 201
    assert second.json()["id"] == first.json()["id"]


@pytest.mark.asyncio
async def test_capacity_conflict_is_409(client: AsyncClient):
    response = await client.post("/woki/bookings", json=dict(BOOKING, party_size=40))
    assert response.status_code == 409
    assert response.json() == {"detail": "No capacity available for requested slot"}


@pytest.mark.asyncio
async def test_validation_error_is_422(client: AsyncClient):
    response = await client.post("/woki/bookings", json=dict(BOOKING, party_size=0))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_booking_is_404(client: AsyncClient):
    response = await client.get("/woki/bookings/missing")
    assert response.status_code == 404
    assert response.json() == {"detail": "Booking not found"}


@pytest.mark.asyncio
async def test_approve(client: AsyncClient):
    created = (await client.post("/woki/bookings", json=dict(BOOKING, party_size=8, notes=None))).json()
    assert created["status"] == "PENDING"

    response = await client.put(f"/woki/bookings/{created['id']}/approve", json={"approver": "Dana"})

    assert response.status_code == 200
    assert response.json()["status"] == "CONFIRMED"
    assert response.json()["notes"] == "Approved by Dana"


@pytest.mark.asyncio
async def test_repack(client: AsyncClient, store):
    store.upsert_booking(make_booking(["T3"], "12:00", "13:00", party_size=2))

    response = await client.post(
        "/woki/bookings/repack",
        json={"restaurant_id": RESTAURANT_ID, "sector_id": SECTOR_ID, "date": DAY.isoformat()},
    )

    assert response.status_code == 200
    assert response.json() == {"moved": 1}


@pytest.mark.asyncio
async def test_waitlist_endpoints(client: AsyncClient):
    response = await client.post(
        "/woki/waitlist",
        json={
            "restaurant_id": RESTAURANT_ID,
            "sector_id": SECTOR_ID,
            "party_size": 2,
            "desired_time": at("19:00").isoformat(),
            "customer_name": "Jamie Doe",
        },
    )
    assert response.status_code == 201
    assert response.json()["status"] == "WAITING"

    listed = await client.get("/woki/waitlist", params={"sector_id": SECTOR_ID})
    assert len(listed.json()) == 1

    response = await client.post(
        "/woki/waitlist/process",
        params={"restaurant_id": RESTAURANT_ID, "sector_id": SECTOR_ID},
    )
    assert response.json() == {"promoted": 1, "expired": 0, "waiting": 0}

    listed = await client.get("/woki/waitlist", params={"sector_id": SECTOR_ID})
    assert listed.json() == []


@pytest.mark.asyncio
async def test_settings_endpoints(client: AsyncClient):
    response = await client.put("/woki/settings/strategy", json={"key": "maxofmins"})
    assert response.json()["current"]["key"] == "maxofmins"

    response = await client.post(
        "/woki/settings/restaurants",
        json={"id": "R9", "name": "Nine", "default_window": {"start_time": "12:00", "end_time": "20:00"}},
    )
    assert response.status_code == 201
    assert "R9-sector-main" in [s["id"] for s in response.json()["sectors"]]

    response = await client.post(
        "/woki/settings/tables",
        json={
            "id": "N1",
            "restaurant_id": "R9",
            "sector_id": "R9-sector-main",
            "min_capacity": 2,
            "max_capacity": 6,
        },
    )
    assert response.status_code == 201

    response = await client.post(
        "/woki/settings/tables",
        json={"id": "N2", "restaurant_id": "R9", "sector_id": SECTOR_ID, "min_capacity": 2, "max_capacity": 2},
    )
    assert response.status_code == 400

    response = await client.post(
        "/woki/settings/restaurants",
        json={"id": "R10", "name": "Ten", "default_window": {"start_time": "18:00", "end_time": "25:00"}},
    )
    assert response.status_code == 422

    response = await client.post(
        "/woki/settings/blackouts",
        json={
            "restaurant_id": "R9",
            "table_id": "N1",
            "start": at("12:00").isoformat(),
            "end": at("14:00").isoformat(),
            "reason": "Private event",
        },
    )
    assert response.status_code == 201
    blackout_id = response.json()["id"]

    catalog = (await client.get("/woki/settings/catalog")).json()
    assert [b["id"] for b in catalog["blackouts"]] == [blackout_id]

    response = await client.delete(f"/woki/settings/blackouts/{blackout_id}")
    assert response.status_code == 204

    response = await client.post("/woki/settings/reset")
    assert response.status_code == 200
    catalog = (await client.get("/woki/settings/catalog")).json()
    assert catalog == {"restaurants": [], "sectors": [], "tables": [], "blackouts": []}
