"""Booking schemas"""

from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from seatwise.models import BookingStatus


class BookingCreate(BaseModel):
    """Create booking request"""
    restaurant_id: str
    sector_id: str
    party_size: int = Field(ge=1, le=100)
    start: datetime
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    customer_name: str = Field(max_length=120)
    customer_contact: Optional[str] = Field(default=None, max_length=120)
    notes: Optional[str] = Field(default=None, max_length=500)


class BookingApprove(BaseModel):
    """Approve booking request"""
    approver: Optional[str] = None


class RepackRequest(BaseModel):
    """Repack request"""
    restaurant_id: str
    sector_id: str
    date: date


class RepackResponse(BaseModel):
    """Repack outcome"""
    moved: int


class BookingResponse(BaseModel):
    """Booking response"""
    id: str
    restaurant_id: str
    sector_id: str
    table_ids: List[str]
    party_size: int
    start: datetime
    end: datetime
    duration_minutes: int
    status: BookingStatus
    customer_name: str
    customer_contact: Optional[str]
    notes: Optional[str]
    approval_expires_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CapacityView(BaseModel):
    min: int
    max: int


class CandidateView(BaseModel):
    """Seating proposal"""
    table_ids: List[str]
    start: datetime
    end: datetime
    capacity: CapacityView


class DiscoveryView(BaseModel):
    """Discovery outcome"""
    outcome: str
    candidate: Optional[CandidateView] = None
    reason: Optional[str] = None
