"""Domain models"""

from seatwise.models.base import Entity, utcnow, to_utc, day_of, at_time_of_day
from seatwise.models.restaurant import Restaurant, Sector, Table, ServiceWindow
from seatwise.models.booking import Booking, BookingStatus, ACTIVE_STATUSES, TERMINAL_STATUSES
from seatwise.models.blackout import Blackout
from seatwise.models.waitlist import WaitlistEntry, WaitlistStatus

__all__ = [
    "Entity",
    "utcnow",
    "to_utc",
    "day_of",
    "at_time_of_day",
    "Restaurant",
    "Sector",
    "Table",
    "ServiceWindow",
    "Booking",
    "BookingStatus",
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "Blackout",
    "WaitlistEntry",
    "WaitlistStatus",
]
