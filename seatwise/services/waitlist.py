"""Waitlist queueing and promotion into bookings"""

from datetime import datetime, timedelta
from typing import List, Optional
import structlog

from seatwise.exceptions import CapacityConflictError, NotFoundError
from seatwise.models import WaitlistEntry, WaitlistStatus, to_utc, utcnow
from seatwise.schemas.booking import BookingCreate
from seatwise.schemas.waitlist import PromotionSummary, WaitlistEntryCreate
from seatwise.services.booking import BookingService
from seatwise.store.memory import InMemoryStore

logger = structlog.get_logger()


class WaitlistService:
    """
    Holds parties that could not be seated and promotes them when capacity frees up.

    Live entries are the WAITING ones still in the store; promoted and
    expired entries are marked and then removed from the queue.
    """

    def __init__(
        self,
        store: InMemoryStore,
        bookings: BookingService,
        ttl_seconds: int = 3_600,
    ):
        self.store = store
        self.bookings = bookings
        self.ttl = timedelta(seconds=ttl_seconds)

    def enqueue(self, request: WaitlistEntryCreate, now: Optional[datetime] = None) -> WaitlistEntry:
        now = now or utcnow()
        entry = WaitlistEntry(
            restaurant_id=request.restaurant_id,
            sector_id=request.sector_id,
            party_size=request.party_size,
            requested_at=now,
            expires_at=now + self.ttl,
            priority=request.priority if request.priority is not None else request.party_size,
            customer_name=request.customer_name,
            customer_contact=request.customer_contact,
            notes=request.notes,
            desired_time=to_utc(request.desired_time) if request.desired_time else None,
            created_at=now,
            updated_at=now,
        )
        self.store.upsert_waitlist_entry(entry)
        logger.info(
            "Waitlist entry added",
            entry_id=entry.id,
            restaurant_id=entry.restaurant_id,
            sector_id=entry.sector_id,
            party_size=entry.party_size,
            priority=entry.priority,
        )
        return entry

    def list(self, sector_id: str, restaurant_id: Optional[str] = None) -> List[WaitlistEntry]:
        entries = self.store.list_waitlist_by_sector(sector_id)
        if restaurant_id is not None:
            entries = [e for e in entries if e.restaurant_id == restaurant_id]
        return entries

    async def process_queue(
        self,
        restaurant_id: str,
        sector_id: str,
        now: Optional[datetime] = None,
    ) -> PromotionSummary:
        """
        Walk the sector queue in promotion order and try to seat each party.

        An entry that still does not fit stays WAITING; any error other
        than a capacity conflict aborts the pass.
        """
        now = now or utcnow()
        summary = PromotionSummary()

        for entry in self.store.list_waitlist_by_sector(sector_id):
            if entry.restaurant_id != restaurant_id:
                continue

            if entry.expires_at <= now:
                self._expire(entry, now)
                summary.expired += 1
                continue

            request = BookingCreate(
                restaurant_id=entry.restaurant_id,
                sector_id=entry.sector_id,
                party_size=entry.party_size,
                start=entry.desired_time or now,
                customer_name=entry.customer_name,
                customer_contact=entry.customer_contact,
                notes=entry.notes,
            )
            try:
                booking = await self.bookings.create_booking(request)
            except CapacityConflictError:
                summary.waiting += 1
                continue

            entry.status = WaitlistStatus.PROMOTED
            entry.booking_id = booking.id
            entry.touch(now)
            self.store.remove_waitlist_entry(entry.id)
            summary.promoted += 1
            logger.info(
                "Waitlist entry promoted",
                entry_id=entry.id,
                booking_id=booking.id,
                table_ids=booking.table_ids,
            )

        return summary

    async def trigger_promotion(self, restaurant_id: str, sector_id: str) -> PromotionSummary:
        """Promotion pass run right after capacity is released"""
        return await self.process_queue(restaurant_id, sector_id)

    async def process_all(self, now: Optional[datetime] = None) -> PromotionSummary:
        """One promotion pass per (restaurant, sector) with live entries"""
        now = now or utcnow()
        pairs = sorted({
            (entry.restaurant_id, entry.sector_id)
            for entry in self.store.list_all_waitlist_entries()
        })

        total = PromotionSummary()
        for restaurant_id, sector_id in pairs:
            total = total.add(await self.process_queue(restaurant_id, sector_id, now))
        return total

    def expire_entry(self, entry_id: str, now: Optional[datetime] = None) -> WaitlistEntry:
        entry = self.store.get_waitlist_entry(entry_id)
        if entry is None:
            raise NotFoundError("Waitlist entry not found")
        self._expire(entry, now or utcnow())
        return entry

    def _expire(self, entry: WaitlistEntry, now: datetime) -> None:
        entry.status = WaitlistStatus.EXPIRED
        entry.touch(now)
        self.store.remove_waitlist_entry(entry.id)
        logger.info("Waitlist entry expired", entry_id=entry.id)
