"""Discovery of the best seating candidate for a party"""

import enum
from datetime import date, datetime, timedelta
from typing import Dict, List, NamedTuple, Optional, Tuple
from pydantic import BaseModel, field_validator
import structlog

from seatwise.engine.capacity import CapacityRange, CapacityStrategyRouter
from seatwise.engine.combos import DEFAULT_MAX_TABLES_PER_COMBO, generate_combos
from seatwise.engine.gaps import GapFinder, Interval
from seatwise.models import day_of, to_utc
from seatwise.store.memory import InMemoryStore

logger = structlog.get_logger()

DEFAULT_DURATIONS_BY_PARTY_SIZE = {2: 75, 4: 90, 8: 120}
DEFAULT_DURATION_MINUTES = 90


class NoCapacityReason(str, enum.Enum):
    RESTAURANT_NOT_FOUND = "restaurant_not_found"
    SECTOR_NOT_FOUND = "sector_not_found"
    NO_TABLES_IN_SECTOR = "no_tables_in_sector"
    CLOSED_FOR_SERVICE = "closed_for_service"
    NO_MATCHING_INTERVAL = "no_matching_interval"


class DiscoveryRequest(BaseModel):
    """What a party is asking for"""
    restaurant_id: str
    sector_id: str
    party_size: int
    day: date
    duration_minutes: Optional[int] = None
    not_before: Optional[datetime] = None

    @field_validator("day", mode="before")
    @classmethod
    def _calendar_day(cls, value):
        if isinstance(value, datetime):
            return day_of(value)
        return value

    @field_validator("not_before")
    @classmethod
    def _utc(cls, value):
        return to_utc(value) if value is not None else None


class Candidate(NamedTuple):
    """Concrete seating proposal"""
    table_ids: Tuple[str, ...]
    start: datetime
    end: datetime
    capacity: CapacityRange

    @property
    def combo_key(self) -> str:
        return ",".join(self.table_ids)

    def rank(self):
        # Earliest start, then tightest fit, then stable combo ordering
        return (self.start, self.capacity.max, self.combo_key)


class DiscoveryResult(BaseModel):
    outcome: str
    candidate: Optional[Candidate] = None
    reason: Optional[NoCapacityReason] = None

    @property
    def found(self) -> bool:
        return self.outcome == "success" and self.candidate is not None

    @classmethod
    def success(cls, candidate: Candidate) -> "DiscoveryResult":
        return cls(outcome="success", candidate=candidate)

    @classmethod
    def no_capacity(cls, reason: NoCapacityReason) -> "DiscoveryResult":
        return cls(outcome="no_capacity", reason=reason)


def build_candidate(
    table_ids: Tuple[str, ...],
    gap: Interval,
    duration_minutes: int,
    capacity: CapacityRange,
    not_before: Optional[datetime] = None,
) -> Optional[Candidate]:
    """Place a seating inside ``gap`` no earlier than ``not_before``, if it fits"""
    start = gap.start
    if not_before is not None and not_before > start:
        start = not_before
    if start >= gap.end:
        return None
    end = start + timedelta(minutes=duration_minutes)
    if end > gap.end:
        return None
    return Candidate(table_ids, start, end, capacity)


class DiscoveryEngine:
    """
    Combines combo enumeration, capacity strategy and gap search into one
    deterministic answer: the best candidate for a request, or a reason
    there is none. Pure read over the store.
    """

    def __init__(
        self,
        store: InMemoryStore,
        router: CapacityStrategyRouter,
        gap_finder: Optional[GapFinder] = None,
        max_tables_per_combo: int = DEFAULT_MAX_TABLES_PER_COMBO,
        durations_by_party_size: Optional[Dict[int, int]] = None,
        default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
    ):
        self.store = store
        self.router = router
        self.gap_finder = gap_finder or GapFinder(store)
        self.max_tables_per_combo = max_tables_per_combo
        self.durations_by_party_size = (
            DEFAULT_DURATIONS_BY_PARTY_SIZE if durations_by_party_size is None
            else durations_by_party_size
        )
        self.default_duration_minutes = default_duration_minutes

    def resolve_duration(self, party_size: int, explicit: Optional[int] = None) -> int:
        if explicit:
            return explicit
        return self.durations_by_party_size.get(party_size) or self.default_duration_minutes

    def discover(self, request: DiscoveryRequest) -> DiscoveryResult:
        restaurant = self.store.get_restaurant(request.restaurant_id)
        if restaurant is None:
            return DiscoveryResult.no_capacity(NoCapacityReason.RESTAURANT_NOT_FOUND)

        sector = self.store.get_sector(request.sector_id)
        if sector is None or sector.restaurant_id != restaurant.id:
            return DiscoveryResult.no_capacity(NoCapacityReason.SECTOR_NOT_FOUND)

        tables = self.store.list_tables_by_sector(sector.id)
        if not tables:
            return DiscoveryResult.no_capacity(NoCapacityReason.NO_TABLES_IN_SECTOR)

        windows = restaurant.windows_for_weekday(request.day.weekday())
        if not windows:
            return DiscoveryResult.no_capacity(NoCapacityReason.CLOSED_FOR_SERVICE)

        duration = self.resolve_duration(request.party_size, request.duration_minutes)
        candidates = self.collect_candidates(
            tables,
            request.party_size,
            request.day,
            duration,
            windows,
            request.not_before,
        )

        if not candidates:
            logger.debug(
                "No matching interval",
                restaurant_id=request.restaurant_id,
                sector_id=request.sector_id,
                party_size=request.party_size,
                day=request.day.isoformat(),
                strategy=self.router.current_key.value,
            )
            return DiscoveryResult.no_capacity(NoCapacityReason.NO_MATCHING_INTERVAL)
        return DiscoveryResult.success(min(candidates, key=Candidate.rank))

    def collect_candidates(self, tables, party_size, day, duration, windows, not_before) -> List[Candidate]:
        candidates: List[Candidate] = []
        for combo in generate_combos(tables, self.max_tables_per_combo):
            capacity = self.router.calculate(combo)
            if not capacity.admits(party_size):
                continue

            table_ids = tuple(sorted(table.id for table in combo))
            for window in windows:
                gaps = self.gap_finder.find_available_slots(table_ids, day, duration, window)
                for gap in gaps:
                    candidate = build_candidate(table_ids, gap, duration, capacity, not_before)
                    if candidate is not None:
                        candidates.append(candidate)
        return candidates
