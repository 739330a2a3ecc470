"""Booking management API endpoints"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response

from seatwise.schemas.booking import (
    BookingApprove,
    BookingCreate,
    BookingResponse,
    RepackRequest,
    RepackResponse,
)
from seatwise.state import AppState, get_state

router = APIRouter()


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    booking_data: BookingCreate,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    state: AppState = Depends(get_state),
):
    """Book the best available seating at or after the requested start"""
    return await state.bookings.create_booking(booking_data, idempotency_key=idempotency_key)


@router.get("/day", response_model=List[BookingResponse])
async def list_day_bookings(
    restaurant_id: str,
    sector_id: str,
    date: date = Query(...),
    include_cancelled: bool = False,
    state: AppState = Depends(get_state),
):
    """Bookings of one sector for a day, ordered by start"""
    return state.bookings.list_day_bookings(
        restaurant_id,
        sector_id,
        date,
        include_cancelled=include_cancelled,
    )


@router.post("/repack", response_model=RepackResponse)
async def repack_bookings(
    repack_data: RepackRequest,
    state: AppState = Depends(get_state),
):
    """Move confirmed bookings onto tables that waste fewer seats"""
    moved = state.bookings.repack(repack_data.restaurant_id, repack_data.sector_id, repack_data.date)
    return RepackResponse(moved=moved)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: str, state: AppState = Depends(get_state)):
    """Get booking details"""
    return state.bookings.get_booking(booking_id)


@router.delete("/{booking_id}", status_code=204)
async def cancel_booking(booking_id: str, state: AppState = Depends(get_state)):
    """Cancel a booking and offer the freed seats to the waitlist"""
    await state.bookings.cancel_booking(booking_id)
    return Response(status_code=204)


@router.put("/{booking_id}/approve", response_model=BookingResponse)
async def approve_booking(
    booking_id: str,
    approval: Optional[BookingApprove] = None,
    state: AppState = Depends(get_state),
):
    """Approve a pending large-party booking"""
    approver = approval.approver if approval else None
    return state.bookings.approve_booking(booking_id, approver=approver)
