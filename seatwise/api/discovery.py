"""Availability discovery API endpoints"""

from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from seatwise.engine.discovery import DiscoveryRequest, DiscoveryResult
from seatwise.schemas.booking import CandidateView, CapacityView, DiscoveryView
from seatwise.state import AppState, get_state

router = APIRouter()


def to_view(result: DiscoveryResult) -> DiscoveryView:
    if not result.found:
        return DiscoveryView(outcome=result.outcome, reason=result.reason.value if result.reason else None)

    candidate = result.candidate
    return DiscoveryView(
        outcome=result.outcome,
        candidate=CandidateView(
            table_ids=list(candidate.table_ids),
            start=candidate.start,
            end=candidate.end,
            capacity=CapacityView(min=candidate.capacity.min, max=candidate.capacity.max),
        ),
    )


@router.get("/discover", response_model=DiscoveryView)
async def discover(
    restaurant_id: str,
    sector_id: str,
    party_size: int = Query(..., ge=1, le=100),
    date: date = Query(...),
    duration_minutes: Optional[int] = Query(None, gt=0),
    not_before: Optional[datetime] = None,
    state: AppState = Depends(get_state),
):
    """Best seating candidate for a party on a day"""
    result = state.bookings.discover_availability(
        DiscoveryRequest(
            restaurant_id=restaurant_id,
            sector_id=sector_id,
            party_size=party_size,
            day=date,
            duration_minutes=duration_minutes,
            not_before=not_before,
        )
    )
    return to_view(result)
