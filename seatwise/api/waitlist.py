"""Waitlist API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from seatwise.schemas.waitlist import PromotionSummary, WaitlistEntryCreate, WaitlistEntryResponse
from seatwise.state import AppState, get_state

router = APIRouter()


@router.post("", response_model=WaitlistEntryResponse, status_code=201)
async def enqueue(entry_data: WaitlistEntryCreate, state: AppState = Depends(get_state)):
    """Add a party to the sector waitlist"""
    return state.waitlist.enqueue(entry_data)


@router.get("", response_model=List[WaitlistEntryResponse])
async def list_waitlist(
    sector_id: str,
    restaurant_id: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    """Live entries in promotion order"""
    return state.waitlist.list(sector_id, restaurant_id=restaurant_id)


@router.post("/process", response_model=PromotionSummary)
async def process_waitlist(
    restaurant_id: Optional[str] = None,
    sector_id: Optional[str] = None,
    state: AppState = Depends(get_state),
):
    """Run a promotion pass now, for one sector or for every queue"""
    if restaurant_id and sector_id:
        return await state.waitlist.process_queue(restaurant_id, sector_id)
    return await state.waitlist.process_all()


@router.delete("/{entry_id}", response_model=WaitlistEntryResponse)
async def expire_entry(entry_id: str, state: AppState = Depends(get_state)):
    """Drop an entry from the queue"""
    return state.waitlist.expire_entry(entry_id)
