"""Waitlist entry model"""

import enum
from datetime import datetime
from typing import Optional

from seatwise.models.base import Entity


class WaitlistStatus(str, enum.Enum):
    """Waitlist lifecycle"""
    WAITING = "WAITING"
    PROMOTED = "PROMOTED"
    EXPIRED = "EXPIRED"


class WaitlistEntry(Entity):
    """Party queued for a sector until capacity frees up"""
    restaurant_id: str
    sector_id: str
    party_size: int
    requested_at: datetime
    expires_at: datetime
    priority: int
    status: WaitlistStatus = WaitlistStatus.WAITING
    customer_name: str = ""
    customer_contact: Optional[str] = None
    notes: Optional[str] = None
    desired_time: Optional[datetime] = None
    booking_id: Optional[str] = None
