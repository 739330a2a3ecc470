"""Catalog administration: restaurants, tables, blackouts and capacity strategy"""

from typing import Dict, List, Optional
import structlog

from seatwise.engine.capacity import CapacityStrategyRouter
from seatwise.exceptions import CatalogValidationError, ConflictError, NotFoundError
from seatwise.models import Blackout, Restaurant, Sector, ServiceWindow, Table, to_utc, utcnow
from seatwise.schemas.settings import (
    BlackoutCreate,
    CatalogSummary,
    DaySchedule,
    ResetResponse,
    RestaurantCreate,
    ServiceWindowIn,
    StrategyOptionView,
    StrategySummary,
    TableCreate,
)
from seatwise.store.idempotency import IdempotencyCache
from seatwise.store.locking import LockManager
from seatwise.store.memory import InMemoryStore

logger = structlog.get_logger()

# Weekday (Monday = 0) -> (open, close) used when a restaurant brings no schedule
DEFAULT_SCHEDULE = {
    0: ("11:00", "22:00"),
    1: ("11:00", "22:00"),
    2: ("11:00", "22:00"),
    3: ("11:00", "23:00"),
    4: ("10:00", "23:00"),
    5: ("10:00", "23:00"),
    6: ("10:00", "22:00"),
}


def build_service_windows(
    schedules: List[DaySchedule],
    default_window: Optional[ServiceWindowIn] = None,
) -> Dict[int, List[ServiceWindow]]:
    """
    Weekly schedule from per-day overrides on top of a base schedule.

    The base is ``default_window`` on every day when given, otherwise the
    house schedule. A day listed with no windows is closed.
    """
    if default_window is not None:
        base = {
            day: [ServiceWindow(start_time=default_window.start_time, end_time=default_window.end_time)]
            for day in DEFAULT_SCHEDULE
        }
    else:
        base = {
            day: [ServiceWindow(start_time=opens, end_time=closes)]
            for day, (opens, closes) in DEFAULT_SCHEDULE.items()
        }

    for schedule in schedules:
        base[schedule.day] = [
            ServiceWindow(start_time=window.start_time, end_time=window.end_time)
            for window in schedule.windows
        ]
    return base


class CatalogService:
    """Administrative operations over the catalog and shared caches"""

    def __init__(
        self,
        store: InMemoryStore,
        router: CapacityStrategyRouter,
        idempotency: IdempotencyCache,
        locks: LockManager,
    ):
        self.store = store
        self.router = router
        self.idempotency = idempotency
        self.locks = locks

    def catalog(self) -> CatalogSummary:
        return CatalogSummary(
            restaurants=self.store.list_restaurants(),
            sectors=self.store.list_sectors(),
            tables=self.store.list_tables(),
            blackouts=self.store.list_blackouts(),
        )

    def create_restaurant(self, request: RestaurantCreate) -> CatalogSummary:
        restaurant_id = request.id.strip()
        name = request.name.strip()
        if not restaurant_id or not name:
            raise CatalogValidationError("Restaurant id and name are required")
        if self.store.get_restaurant(restaurant_id):
            raise ConflictError(f"Restaurant {restaurant_id} already exists")

        sector_inputs = [(s.id.strip(), s.name.strip(), s.description) for s in request.sectors]
        if not sector_inputs:
            sector_inputs = [(f"{restaurant_id}-sector-main", "Main Dining", None)]

        seen = set()
        for sector_id, sector_name, _ in sector_inputs:
            if not sector_id or not sector_name:
                raise CatalogValidationError("Sector id and name are required")
            if sector_id.lower() in seen:
                raise CatalogValidationError("Sector ids must be unique")
            seen.add(sector_id.lower())
            if self.store.get_sector(sector_id):
                raise ConflictError(f"Sector {sector_id} already exists")

        now = utcnow()
        restaurant = Restaurant(
            id=restaurant_id,
            name=name,
            timezone=(request.timezone or "UTC").strip(),
            service_windows=build_service_windows(request.service_windows, request.default_window),
            created_at=now,
            updated_at=now,
        )
        self.store.upsert_restaurant(restaurant)
        for sector_id, sector_name, description in sector_inputs:
            self.store.upsert_sector(
                Sector(
                    id=sector_id,
                    restaurant_id=restaurant.id,
                    name=sector_name,
                    description=description,
                    created_at=now,
                    updated_at=now,
                )
            )

        logger.info(
            "Restaurant created",
            restaurant_id=restaurant.id,
            sectors=[sector_id for sector_id, _, _ in sector_inputs],
        )
        return self.catalog()

    def create_table(self, request: TableCreate) -> CatalogSummary:
        restaurant = self.store.get_restaurant(request.restaurant_id)
        if restaurant is None:
            raise CatalogValidationError(f"Unknown restaurant {request.restaurant_id}")

        sector = self.store.get_sector(request.sector_id)
        if sector is None or sector.restaurant_id != restaurant.id:
            raise CatalogValidationError(
                f"Sector {request.sector_id} does not belong to {request.restaurant_id}"
            )
        if self.store.get_table(request.id):
            raise ConflictError(f"Table {request.id} already exists")
        if request.min_capacity > request.max_capacity:
            raise CatalogValidationError("min_capacity must be less than or equal to max_capacity")

        peers: List[Table] = []
        for peer_id in dict.fromkeys(request.combinable_with):
            peer = self.store.get_table(peer_id)
            if peer is None:
                raise CatalogValidationError(f"Combinable table {peer_id} does not exist")
            if peer.restaurant_id != restaurant.id or peer.sector_id != sector.id:
                raise CatalogValidationError(
                    f"Table {peer_id} belongs to a different restaurant or sector"
                )
            peers.append(peer)

        now = utcnow()
        table = Table(
            id=request.id,
            restaurant_id=restaurant.id,
            sector_id=sector.id,
            label=request.label,
            min_capacity=request.min_capacity,
            max_capacity=request.max_capacity,
            combinable_with=[peer.id for peer in peers],
            created_at=now,
            updated_at=now,
        )
        self.store.upsert_table(table)

        # Combinability is mutual
        for peer in peers:
            if table.id not in peer.combinable_with:
                peer.combinable_with = peer.combinable_with + [table.id]
            peer.touch(now)
            self.store.upsert_table(peer)

        logger.info("Table created", table_id=table.id, sector_id=sector.id, peers=table.combinable_with)
        return self.catalog()

    def create_blackout(self, request: BlackoutCreate) -> Blackout:
        restaurant = self.store.get_restaurant(request.restaurant_id)
        if restaurant is None:
            raise CatalogValidationError(f"Unknown restaurant {request.restaurant_id}")

        sector_id = request.sector_id
        if sector_id is not None:
            sector = self.store.get_sector(sector_id)
            if sector is None or sector.restaurant_id != restaurant.id:
                raise CatalogValidationError(f"Sector {sector_id} does not belong to {restaurant.id}")

        if request.table_id is not None:
            table = self.store.get_table(request.table_id)
            if table is None or table.restaurant_id != restaurant.id:
                raise CatalogValidationError(f"Table {request.table_id} does not belong to {restaurant.id}")
            if sector_id is not None and table.sector_id != sector_id:
                raise CatalogValidationError(f"Table {table.id} is not in sector {sector_id}")
            sector_id = table.sector_id
        elif sector_id is None:
            raise CatalogValidationError("A blackout needs a sector or a table")

        start, end = to_utc(request.start), to_utc(request.end)
        if end <= start:
            raise CatalogValidationError("Blackout end must be after its start")

        blackout = Blackout(
            restaurant_id=restaurant.id,
            sector_id=sector_id,
            table_id=request.table_id,
            start=start,
            end=end,
            reason=request.reason,
        )
        self.store.upsert_blackout(blackout)
        logger.info(
            "Blackout created",
            blackout_id=blackout.id,
            sector_id=sector_id,
            table_id=request.table_id,
            start=start.isoformat(),
            end=end.isoformat(),
        )
        return blackout

    def remove_blackout(self, blackout_id: str) -> Blackout:
        blackout = self.store.remove_blackout(blackout_id)
        if blackout is None:
            raise NotFoundError("Blackout not found")
        logger.info("Blackout removed", blackout_id=blackout_id)
        return blackout

    def strategy_summary(self) -> StrategySummary:
        return StrategySummary(
            current=StrategyOptionView(**self.router.current_option()._asdict()),
            available=[
                StrategyOptionView(**option._asdict())
                for option in self.router.available_options()
            ],
        )

    def update_strategy(self, key: str) -> StrategySummary:
        self.router.set_strategy(key)
        return self.strategy_summary()

    def reset(self) -> ResetResponse:
        """Wipe the catalog, bookings, waitlist, idempotency records and locks"""
        self.idempotency.clear()
        self.locks.clear()
        self.store.clear()
        message = "In-memory store, idempotency cache and locks cleared."
        logger.info(message)
        return ResetResponse(message=message, timestamp=utcnow())
