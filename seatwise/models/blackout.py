"""Blackout model"""

from datetime import datetime
from typing import Optional

from seatwise.models.base import Entity


class Blackout(Entity):
    """
    Period during which tables cannot be booked.
    Scoped to a whole sector, a single table, or both.
    """
    restaurant_id: str
    sector_id: Optional[str] = None
    table_id: Optional[str] = None
    start: datetime
    end: datetime
    reason: str = ""

    def applies_to(self, table_id: str, sector_id: str) -> bool:
        if self.table_id is not None:
            return self.table_id == table_id
        return self.sector_id == sector_id

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return self.start < end and self.end > start
