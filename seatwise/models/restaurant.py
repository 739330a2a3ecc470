"""Restaurant, sector and table models"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from seatwise.models.base import Entity


class ServiceWindow(BaseModel):
    """Opening range within a day, HH:MM in restaurant time"""
    start_time: str
    end_time: str


class Restaurant(Entity):
    """Restaurant with its weekly service schedule"""
    name: str
    timezone: str = "UTC"
    # Weekday (Monday = 0) -> opening windows
    service_windows: Dict[int, List[ServiceWindow]] = Field(default_factory=dict)

    def windows_for_weekday(self, weekday: int) -> List[ServiceWindow]:
        return self.service_windows.get(weekday, [])


class Sector(Entity):
    """Dining area inside a restaurant"""
    restaurant_id: str
    name: str
    description: Optional[str] = None


class Table(Entity):
    """Physical table and the peers it may be pushed together with"""
    restaurant_id: str
    sector_id: str
    label: str = ""
    min_capacity: int
    max_capacity: int
    combinable_with: List[str] = Field(default_factory=list)

    def can_combine_with(self, other: "Table") -> bool:
        if other.id == self.id:
            return True
        return other.id in self.combinable_with and self.id in other.combinable_with

    def admits(self, party_size: int) -> bool:
        return self.min_capacity <= party_size <= self.max_capacity
