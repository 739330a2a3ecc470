"""Catalog and strategy schemas"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from seatwise.models import Blackout, Restaurant, Sector, Table


class ServiceWindowIn(BaseModel):
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(pattern=r"^\d{2}:\d{2}$")

    @field_validator("start_time", "end_time")
    @classmethod
    def _clock_time(cls, value: str) -> str:
        hours, minutes = (int(part) for part in value.split(":"))
        if minutes > 59 or hours > 24 or (hours == 24 and minutes):
            raise ValueError(f"{value} is not a time of day between 00:00 and 24:00")
        return value


class DaySchedule(BaseModel):
    """Windows for one weekday (Monday = 0)"""
    day: int = Field(ge=0, le=6)
    windows: List[ServiceWindowIn] = []


class SectorCreate(BaseModel):
    id: str
    name: str
    description: Optional[str] = None


class RestaurantCreate(BaseModel):
    """Create restaurant request"""
    id: str
    name: str
    timezone: str = "UTC"
    service_windows: List[DaySchedule] = []
    default_window: Optional[ServiceWindowIn] = None
    sectors: List[SectorCreate] = []


class TableCreate(BaseModel):
    """Create table request"""
    id: str
    restaurant_id: str
    sector_id: str
    label: str = ""
    min_capacity: int = Field(ge=1)
    max_capacity: int = Field(ge=1)
    combinable_with: List[str] = []


class BlackoutCreate(BaseModel):
    """Create blackout request"""
    restaurant_id: str
    sector_id: Optional[str] = None
    table_id: Optional[str] = None
    start: datetime
    end: datetime
    reason: str = ""


class CatalogSummary(BaseModel):
    restaurants: List[Restaurant]
    sectors: List[Sector]
    tables: List[Table]
    blackouts: List[Blackout] = []


class StrategyOptionView(BaseModel):
    key: str
    label: str
    description: str


class StrategySummary(BaseModel):
    current: StrategyOptionView
    available: List[StrategyOptionView]


class StrategyUpdate(BaseModel):
    key: str


class ResetResponse(BaseModel):
    message: str
    timestamp: datetime
