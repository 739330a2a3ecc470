"""Repacking of confirmed bookings onto tighter tables"""

import sys
from datetime import date, datetime
from typing import Optional, Sequence
import structlog

from seatwise.engine.capacity import CapacityStrategyRouter
from seatwise.engine.gaps import GapFinder
from seatwise.models import Booking, BookingStatus, Table
from seatwise.store.memory import InMemoryStore

logger = structlog.get_logger()

# Waste of a booking whose tables no longer exist
MAX_WASTE = sys.maxsize


class RepackOptimizer:
    """Moves confirmed bookings to a single table that wastes fewer seats"""

    def __init__(
        self,
        store: InMemoryStore,
        router: CapacityStrategyRouter,
        gap_finder: Optional[GapFinder] = None,
    ):
        self.store = store
        self.router = router
        self.gap_finder = gap_finder or GapFinder(store)

    def optimize(self, restaurant_id: str, sector_id: str, day: date) -> int:
        """Reassign bookings of one sector/day; returns how many moved"""
        tables = sorted(self.store.list_tables_by_sector(sector_id), key=lambda t: t.id)
        bookings = [
            booking
            for booking in self.store.list_bookings_by_sector_date(sector_id, day)
            if booking.status == BookingStatus.CONFIRMED and booking.restaurant_id == restaurant_id
        ]

        moved = 0
        for booking in bookings:
            current_waste = self.waste(booking)
            target = self.find_better_table(tables, booking)
            if target is None:
                continue

            target_waste = target.max_capacity - booking.party_size
            if target_waste >= current_waste:
                continue

            previous = list(booking.table_ids)
            booking.table_ids = [target.id]
            booking.touch()
            self.store.upsert_booking(booking)
            moved += 1
            logger.info(
                "Booking repacked",
                booking_id=booking.id,
                from_tables=previous,
                to_table=target.id,
                waste_before=None if current_waste == MAX_WASTE else current_waste,
                waste_after=target_waste,
            )

        logger.info(
            "Repack finished",
            restaurant_id=restaurant_id,
            sector_id=sector_id,
            day=str(day),
            considered=len(bookings),
            moved=moved,
        )
        return moved

    def waste(self, booking: Booking) -> int:
        tables = self.store.list_tables_by_ids(booking.table_ids)
        if not tables:
            return MAX_WASTE
        return self.router.calculate(tables).max - booking.party_size

    def find_better_table(self, tables: Sequence[Table], booking: Booking) -> Optional[Table]:
        best: Optional[Table] = None
        best_waste = MAX_WASTE
        for table in tables:
            if table.id in booking.table_ids:
                continue
            if not table.admits(booking.party_size):
                continue
            if self.has_conflicts(table, booking.start, booking.end, booking.id):
                continue
            waste = table.max_capacity - booking.party_size
            if waste < best_waste:
                best, best_waste = table, waste
        return best

    def has_conflicts(self, table: Table, start: datetime, end: datetime, ignore_id: str) -> bool:
        """Any active booking or blackout on ``table`` overlapping [start, end)"""
        for other in self.store.list_bookings_by_table_date(table.id, start):
            if other.id != ignore_id and other.is_active and other.overlaps(start, end):
                return True
        blackouts = self.gap_finder.blackouts_for_table(table.id, table.sector_id, start)
        return any(blackout.overlaps(start, end) for blackout in blackouts)
