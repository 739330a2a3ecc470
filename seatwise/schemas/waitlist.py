"""Waitlist schemas"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from seatwise.models import WaitlistStatus


class WaitlistEntryCreate(BaseModel):
    """Enqueue request"""
    restaurant_id: str
    sector_id: str
    party_size: int = Field(ge=1, le=100)
    priority: Optional[int] = None
    desired_time: Optional[datetime] = None
    customer_name: str = Field(max_length=120)
    customer_contact: Optional[str] = Field(default=None, max_length=120)
    notes: Optional[str] = Field(default=None, max_length=500)


class WaitlistEntryResponse(BaseModel):
    """Waitlist entry response"""
    id: str
    restaurant_id: str
    sector_id: str
    party_size: int
    priority: int
    status: WaitlistStatus
    requested_at: datetime
    expires_at: datetime
    desired_time: Optional[datetime]
    customer_name: str
    customer_contact: Optional[str]
    notes: Optional[str]
    booking_id: Optional[str]

    class Config:
        from_attributes = True


class PromotionSummary(BaseModel):
    """Result of one promotion pass"""
    promoted: int = 0
    expired: int = 0
    waiting: int = 0

    def add(self, other: "PromotionSummary") -> "PromotionSummary":
        return PromotionSummary(
            promoted=self.promoted + other.promoted,
            expired=self.expired + other.expired,
            waiting=self.waiting + other.waiting,
        )
