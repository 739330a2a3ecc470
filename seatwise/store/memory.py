"""In-memory entity store with secondary indices"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from seatwise.models import (
    Blackout,
    Booking,
    Restaurant,
    Sector,
    Table,
    WaitlistEntry,
    day_of,
)

DayLike = Union[date, datetime]


class InMemoryStore:
    """
    Owns every domain entity for the process.

    Bookings and blackouts are indexed by (sector, day) and (table, day),
    waitlist entries by sector. Callers only get copies of the index
    contents through the list_* methods; every mutation goes through
    upsert_*/remove_* so the indices cannot drift from the primary maps.
    """

    def __init__(self):
        self._restaurants: Dict[str, Restaurant] = {}
        self._sectors: Dict[str, Sector] = {}
        self._tables: Dict[str, Table] = {}
        self._bookings: Dict[str, Booking] = {}
        self._blackouts: Dict[str, Blackout] = {}
        self._waitlist: Dict[str, WaitlistEntry] = {}

        self._bookings_by_sector_day: Dict[Tuple[str, date], Set[str]] = defaultdict(set)
        self._bookings_by_table_day: Dict[Tuple[str, date], Set[str]] = defaultdict(set)
        self._blackouts_by_sector_day: Dict[Tuple[str, date], Set[str]] = defaultdict(set)
        self._blackouts_by_table_day: Dict[Tuple[str, date], Set[str]] = defaultdict(set)
        self._waitlist_by_sector: Dict[str, Set[str]] = defaultdict(set)
        # Index keys each entity was filed under, so in-place edits unindex cleanly
        self._booking_keys: Dict[str, List[Tuple[dict, tuple]]] = {}
        self._blackout_keys: Dict[str, List[Tuple[dict, tuple]]] = {}

    # Restaurants

    def upsert_restaurant(self, restaurant: Restaurant) -> None:
        self._restaurants[restaurant.id] = restaurant

    def get_restaurant(self, restaurant_id: str) -> Optional[Restaurant]:
        return self._restaurants.get(restaurant_id)

    def list_restaurants(self) -> List[Restaurant]:
        return list(self._restaurants.values())

    # Sectors

    def upsert_sector(self, sector: Sector) -> None:
        self._sectors[sector.id] = sector

    def get_sector(self, sector_id: str) -> Optional[Sector]:
        return self._sectors.get(sector_id)

    def list_sectors(self) -> List[Sector]:
        return list(self._sectors.values())

    def list_sectors_by_restaurant(self, restaurant_id: str) -> List[Sector]:
        return [s for s in self._sectors.values() if s.restaurant_id == restaurant_id]

    # Tables

    def upsert_table(self, table: Table) -> None:
        self._tables[table.id] = table

    def get_table(self, table_id: str) -> Optional[Table]:
        return self._tables.get(table_id)

    def list_tables(self) -> List[Table]:
        return list(self._tables.values())

    def list_tables_by_sector(self, sector_id: str) -> List[Table]:
        return [t for t in self._tables.values() if t.sector_id == sector_id]

    def list_tables_by_ids(self, table_ids: Iterable[str]) -> List[Table]:
        """Tables for the given ids, silently skipping unknown ones"""
        return [self._tables[tid] for tid in table_ids if tid in self._tables]

    # Bookings

    def upsert_booking(self, booking: Booking) -> None:
        self._unindex(self._booking_keys, booking.id)
        self._bookings[booking.id] = booking
        self._index_booking(booking)

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def list_bookings(self) -> List[Booking]:
        return list(self._bookings.values())

    def list_bookings_by_sector_date(self, sector_id: str, day: DayLike) -> List[Booking]:
        ids = self._bookings_by_sector_day.get((sector_id, day_of(day)), ())
        return self._sorted(self._bookings, ids)

    def list_bookings_by_table_date(self, table_id: str, day: DayLike) -> List[Booking]:
        ids = self._bookings_by_table_day.get((table_id, day_of(day)), ())
        return self._sorted(self._bookings, ids)

    def remove_booking(self, booking_id: str) -> Optional[Booking]:
        booking = self._bookings.pop(booking_id, None)
        if booking is not None:
            self._unindex(self._booking_keys, booking_id)
        return booking

    # Blackouts

    def upsert_blackout(self, blackout: Blackout) -> None:
        self._unindex(self._blackout_keys, blackout.id)
        self._blackouts[blackout.id] = blackout
        self._index_blackout(blackout)

    def get_blackout(self, blackout_id: str) -> Optional[Blackout]:
        return self._blackouts.get(blackout_id)

    def list_blackouts(self) -> List[Blackout]:
        return list(self._blackouts.values())

    def list_blackouts_by_sector_date(self, sector_id: str, day: DayLike) -> List[Blackout]:
        ids = self._blackouts_by_sector_day.get((sector_id, day_of(day)), ())
        return self._sorted(self._blackouts, ids)

    def list_blackouts_by_table_date(self, table_id: str, day: DayLike) -> List[Blackout]:
        ids = self._blackouts_by_table_day.get((table_id, day_of(day)), ())
        return self._sorted(self._blackouts, ids)

    def remove_blackout(self, blackout_id: str) -> Optional[Blackout]:
        blackout = self._blackouts.pop(blackout_id, None)
        if blackout is not None:
            self._unindex(self._blackout_keys, blackout_id)
        return blackout

    # Waitlist

    def upsert_waitlist_entry(self, entry: WaitlistEntry) -> None:
        self._waitlist[entry.id] = entry
        self._waitlist_by_sector[entry.sector_id].add(entry.id)

    def get_waitlist_entry(self, entry_id: str) -> Optional[WaitlistEntry]:
        return self._waitlist.get(entry_id)

    def list_waitlist_by_sector(self, sector_id: str) -> List[WaitlistEntry]:
        """Live entries in promotion order: priority desc, then request time asc"""
        ids = self._waitlist_by_sector.get(sector_id, ())
        entries = [self._waitlist[eid] for eid in ids if eid in self._waitlist]
        return sorted(entries, key=lambda e: (-e.priority, e.requested_at, e.id))

    def list_all_waitlist_entries(self) -> List[WaitlistEntry]:
        return list(self._waitlist.values())

    def remove_waitlist_entry(self, entry_id: str) -> Optional[WaitlistEntry]:
        entry = self._waitlist.pop(entry_id, None)
        if entry is not None:
            self._waitlist_by_sector[entry.sector_id].discard(entry_id)
        return entry

    def clear(self) -> None:
        """Wipe every map and index"""
        for mapping in (
            self._restaurants,
            self._sectors,
            self._tables,
            self._bookings,
            self._blackouts,
            self._waitlist,
            self._bookings_by_sector_day,
            self._bookings_by_table_day,
            self._blackouts_by_sector_day,
            self._blackouts_by_table_day,
            self._waitlist_by_sector,
            self._booking_keys,
            self._blackout_keys,
        ):
            mapping.clear()

    # Index maintenance

    def _index_booking(self, booking: Booking) -> None:
        day = day_of(booking.start)
        keys = [(self._bookings_by_sector_day, (booking.sector_id, day))]
        keys.extend((self._bookings_by_table_day, (tid, day)) for tid in booking.table_ids)
        self._file(self._booking_keys, booking.id, keys)

    def _index_blackout(self, blackout: Blackout) -> None:
        # Filed under every day the blackout touches; the end is exclusive
        day = day_of(blackout.start)
        last = day_of(blackout.end - timedelta(microseconds=1))
        keys = []
        while day <= last:
            if blackout.sector_id:
                keys.append((self._blackouts_by_sector_day, (blackout.sector_id, day)))
            if blackout.table_id:
                keys.append((self._blackouts_by_table_day, (blackout.table_id, day)))
            day += timedelta(days=1)
        self._file(self._blackout_keys, blackout.id, keys)

    @staticmethod
    def _file(registry: dict, entity_id: str, keys: List[Tuple[dict, tuple]]) -> None:
        for index, key in keys:
            index[key].add(entity_id)
        registry[entity_id] = keys

    @staticmethod
    def _unindex(registry: dict, entity_id: str) -> None:
        for index, key in registry.pop(entity_id, ()):
            ids = index.get(key)
            if ids is None:
                continue
            ids.discard(entity_id)
            if not ids:
                del index[key]

    @staticmethod
    def _sorted(source: dict, ids: Iterable[str]) -> list:
        items = [source[i] for i in ids if i in source]
        return sorted(items, key=lambda item: (item.start, item.id))
