"""Booking model"""

import enum
from datetime import datetime
from typing import List, Optional
from pydantic import Field

from seatwise.models.base import Entity


class BookingStatus(str, enum.Enum):
    """Booking lifecycle"""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"


# Statuses that hold a table
ACTIVE_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.PENDING)
TERMINAL_STATUSES = (BookingStatus.CANCELLED, BookingStatus.REJECTED)


class Booking(Entity):
    """Table reservation for a party"""
    restaurant_id: str
    sector_id: str
    table_ids: List[str] = Field(default_factory=list)
    party_size: int
    start: datetime
    end: datetime
    status: BookingStatus = BookingStatus.CONFIRMED
    customer_name: str = ""
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    approval_expires_at: Optional[datetime] = None
    idempotency_key: Optional[str] = None
    duration_minutes: int

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and self.end > start
