"""Application services on top of the engine and store"""

from seatwise.services.booking import BookingService
from seatwise.services.catalog import CatalogService
from seatwise.services.waitlist import WaitlistService

__all__ = ["BookingService", "CatalogService", "WaitlistService"]
