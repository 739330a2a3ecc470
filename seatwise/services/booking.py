"""Booking lifecycle: discovery, locked commit, cancellation, approval, expiry"""

from datetime import date, datetime, timedelta
from typing import Awaitable, Callable, List, Optional
import structlog

from seatwise.engine.discovery import (
    Candidate,
    DiscoveryEngine,
    DiscoveryRequest,
    DiscoveryResult,
)
from seatwise.engine.repack import RepackOptimizer
from seatwise.exceptions import CapacityConflictError, InvalidTransitionError, NotFoundError
from seatwise.models import (
    Booking,
    BookingStatus,
    TERMINAL_STATUSES,
    to_utc,
    utcnow,
)
from seatwise.schemas.booking import BookingCreate
from seatwise.store.idempotency import IdempotencyCache
from seatwise.store.locking import LockManager, build_lock_key
from seatwise.store.memory import InMemoryStore

logger = structlog.get_logger()

PromotionTrigger = Callable[[str, str], Awaitable[object]]


class BookingService:
    """
    Coordinates the booking lifecycle.

    Creation is the only path that writes new bookings: discover a
    candidate, take the lock for its exact tables and start, re-check for
    overlaps against the store, then persist. Cancellations and rejected
    approvals hand freed capacity to the waitlist through ``on_capacity_freed``.
    """

    def __init__(
        self,
        store: InMemoryStore,
        discovery: DiscoveryEngine,
        locks: LockManager,
        idempotency: IdempotencyCache,
        repack: RepackOptimizer,
        large_group_threshold: int = 8,
        approval_ttl_seconds: int = 86_400,
        on_capacity_freed: Optional[PromotionTrigger] = None,
    ):
        self.store = store
        self.discovery = discovery
        self.locks = locks
        self.idempotency = idempotency
        self.repacker = repack
        self.large_group_threshold = large_group_threshold
        self.approval_ttl = timedelta(seconds=approval_ttl_seconds)
        self.on_capacity_freed = on_capacity_freed

    def discover_availability(self, request: DiscoveryRequest) -> DiscoveryResult:
        return self.discovery.discover(request)

    async def create_booking(
        self,
        request: BookingCreate,
        idempotency_key: Optional[str] = None,
    ) -> Booking:
        """Commit a booking for the earliest candidate at or after ``request.start``"""
        if idempotency_key:
            existing = self.idempotency.get(idempotency_key)
            if existing is not None:
                logger.info(
                    "Idempotent replay",
                    idempotency_key=idempotency_key,
                    booking_id=existing.id,
                )
                return existing

        start = to_utc(request.start)
        discovery = self.discovery.discover(
            DiscoveryRequest(
                restaurant_id=request.restaurant_id,
                sector_id=request.sector_id,
                party_size=request.party_size,
                day=start,
                duration_minutes=request.duration_minutes,
                not_before=start,
            )
        )
        if not discovery.found:
            logger.info(
                "Booking rejected, no capacity",
                restaurant_id=request.restaurant_id,
                sector_id=request.sector_id,
                party_size=request.party_size,
                start=start.isoformat(),
                reason=discovery.reason.value if discovery.reason else None,
            )
            raise CapacityConflictError("No capacity available for requested slot")

        candidate = discovery.candidate
        lock_key = build_lock_key(
            request.restaurant_id,
            request.sector_id,
            candidate.table_ids,
            candidate.start,
        )
        waiting = self.locks.waiting_count(lock_key)
        if waiting > 0:
            logger.info("Lock contention", lock_key=lock_key, waiting=waiting)

        async with self.locks.hold(lock_key):
            if self.has_overlap(candidate.table_ids, candidate.start, candidate.end):
                logger.info("Booking conflict on commit", lock_key=lock_key)
                raise CapacityConflictError("Slot already taken")

            booking = self._build_booking(request, candidate, idempotency_key)
            self.store.upsert_booking(booking)
            if idempotency_key:
                self.idempotency.set(idempotency_key, booking)

        logger.info(
            "Booking created",
            booking_id=booking.id,
            restaurant_id=booking.restaurant_id,
            sector_id=booking.sector_id,
            table_ids=booking.table_ids,
            start=booking.start.isoformat(),
            status=booking.status.value,
        )
        return booking

    def has_overlap(self, table_ids, start: datetime, end: datetime) -> bool:
        """Whether any active booking on these tables intersects [start, end)"""
        for table_id in table_ids:
            for booking in self.store.list_bookings_by_table_date(table_id, start):
                if booking.is_active and booking.overlaps(start, end):
                    return True
        return False

    def list_day_bookings(
        self,
        restaurant_id: str,
        sector_id: str,
        day: date,
        include_cancelled: bool = False,
    ) -> List[Booking]:
        bookings = self.store.list_bookings_by_sector_date(sector_id, day)
        return [
            booking
            for booking in bookings
            if booking.restaurant_id == restaurant_id
            and (include_cancelled or booking.status != BookingStatus.CANCELLED)
        ]

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.store.get_booking(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    async def cancel_booking(self, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.status in TERMINAL_STATUSES:
            raise InvalidTransitionError(f"Booking is already {booking.status.value}")

        booking.status = BookingStatus.CANCELLED
        booking.touch()
        self.store.upsert_booking(booking)
        logger.info("Booking cancelled", booking_id=booking.id)

        await self._capacity_freed(booking)
        return booking

    def approve_booking(self, booking_id: str, approver: Optional[str] = None) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.status == BookingStatus.CONFIRMED:
            return booking
        if booking.status != BookingStatus.PENDING:
            raise InvalidTransitionError(f"Cannot approve a {booking.status.value} booking")

        booking.status = BookingStatus.CONFIRMED
        booking.approval_expires_at = None
        booking.notes = " | ".join(
            part for part in (booking.notes, f"Approved by {approver or 'manager'}") if part
        )
        booking.touch()
        self.store.upsert_booking(booking)
        logger.info("Booking approved", booking_id=booking.id, approver=approver or "manager")
        return booking

    async def expire_pending_approvals(self, now: Optional[datetime] = None) -> int:
        """Reject pending bookings whose approval window has closed"""
        now = now or utcnow()
        expired = [
            booking
            for booking in self.store.list_bookings()
            if booking.status == BookingStatus.PENDING
            and booking.approval_expires_at is not None
            and booking.approval_expires_at <= now
        ]
        for booking in expired:
            booking.status = BookingStatus.REJECTED
            booking.touch(now)
            self.store.upsert_booking(booking)
            logger.info("Pending booking rejected", booking_id=booking.id)
            await self._capacity_freed(booking)
        return len(expired)

    def repack(self, restaurant_id: str, sector_id: str, day: date) -> int:
        return self.repacker.optimize(restaurant_id, sector_id, day)

    async def _capacity_freed(self, booking: Booking) -> None:
        if self.on_capacity_freed is not None:
            await self.on_capacity_freed(booking.restaurant_id, booking.sector_id)

    def _build_booking(
        self,
        request: BookingCreate,
        candidate: Candidate,
        idempotency_key: Optional[str],
    ) -> Booking:
        now = utcnow()
        needs_approval = request.party_size >= self.large_group_threshold
        duration = request.duration_minutes or int(
            (candidate.end - candidate.start).total_seconds() // 60
        )
        return Booking(
            restaurant_id=request.restaurant_id,
            sector_id=request.sector_id,
            table_ids=list(candidate.table_ids),
            party_size=request.party_size,
            start=candidate.start,
            end=candidate.end,
            status=BookingStatus.PENDING if needs_approval else BookingStatus.CONFIRMED,
            customer_name=request.customer_name,
            customer_contact=request.customer_contact,
            notes=request.notes,
            approval_expires_at=now + self.approval_ttl if needs_approval else None,
            idempotency_key=idempotency_key,
            duration_minutes=duration,
            created_at=now,
            updated_at=now,
        )
