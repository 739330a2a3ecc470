"""Free-interval computation for tables and table combos"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, NamedTuple, Sequence, Union

from seatwise.models import Blackout, ServiceWindow, at_time_of_day, day_of
from seatwise.store.memory import InMemoryStore


class Interval(NamedTuple):
    """Half-open time range [start, end)"""
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """Sort and merge overlapping or touching intervals"""
    merged: List[Interval] = []
    for interval in sorted(intervals):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            if interval.end > last.end:
                merged[-1] = Interval(last.start, interval.end)
        else:
            merged.append(interval)
    return merged


def complement(occupied: Sequence[Interval], window: Interval) -> List[Interval]:
    """Free time inside ``window`` given merged, sorted ``occupied`` intervals"""
    free: List[Interval] = []
    cursor = window.start
    for interval in occupied:
        if interval.start > cursor:
            free.append(Interval(cursor, interval.start))
        if interval.end > cursor:
            cursor = interval.end
    if cursor < window.end:
        free.append(Interval(cursor, window.end))
    return free


def intersect(left: Sequence[Interval], right: Sequence[Interval]) -> List[Interval]:
    """Two-pointer intersection of two sorted, non-overlapping interval lists"""
    result: List[Interval] = []
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        start = max(a.start, b.start)
        end = min(a.end, b.end)
        if start < end:
            result.append(Interval(start, end))
        if a.end < b.end:
            i += 1
        else:
            j += 1
    return result


def clip(start: datetime, end: datetime, window: Interval):
    start = max(start, window.start)
    end = min(end, window.end)
    if start < end:
        return Interval(start, end)
    return None


class GapFinder:
    """Computes bookable gaps per table and intersects them across combos"""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def find_available_slots(
        self,
        table_ids: Sequence[str],
        day: Union[date, datetime],
        duration_minutes: int,
        window: ServiceWindow,
    ) -> List[Interval]:
        """
        Gaps at least ``duration_minutes`` long, inside the service window,
        where every table in ``table_ids`` is free.

        Tables are folded in id order so the result never depends on the
        order the caller lists them in.
        """
        if not table_ids:
            return []

        day = day_of(day)
        bounds = Interval(
            at_time_of_day(day, window.start_time),
            at_time_of_day(day, window.end_time),
        )
        if bounds.start >= bounds.end:
            return []

        gaps: List[Interval] = []
        for index, table_id in enumerate(sorted(set(table_ids))):
            table_gaps = self.gaps_for_table(table_id, day, bounds)
            gaps = table_gaps if index == 0 else intersect(gaps, table_gaps)
            if not gaps:
                return []

        minimum = timedelta(minutes=duration_minutes)
        return [gap for gap in gaps if gap.duration >= minimum]

    def gaps_for_table(self, table_id: str, day: date, bounds: Interval) -> List[Interval]:
        table = self.store.get_table(table_id)
        if table is None:
            return []

        occupied: List[Interval] = []
        for booking in self.store.list_bookings_by_table_date(table_id, day):
            if not booking.is_active:
                continue
            interval = clip(booking.start, booking.end, bounds)
            if interval:
                occupied.append(interval)

        for blackout in self.blackouts_for_table(table_id, table.sector_id, day):
            interval = clip(blackout.start, blackout.end, bounds)
            if interval:
                occupied.append(interval)

        return complement(merge_intervals(occupied), bounds)

    def blackouts_for_table(self, table_id: str, sector_id: str, day: date) -> List[Blackout]:
        """Table-scoped plus sector-wide blackouts for a table, deduplicated by id"""
        found = {b.id: b for b in self.store.list_blackouts_by_table_date(table_id, day)}
        for blackout in self.store.list_blackouts_by_sector_date(sector_id, day):
            if blackout.applies_to(table_id, sector_id):
                found.setdefault(blackout.id, blackout)
        return list(found.values())
