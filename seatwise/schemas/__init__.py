"""Pydantic schemas for request/response validation"""

from seatwise.schemas.booking import (
    BookingCreate,
    BookingApprove,
    BookingResponse,
    CandidateView,
    CapacityView,
    DiscoveryView,
    RepackRequest,
    RepackResponse,
)
from seatwise.schemas.waitlist import (
    WaitlistEntryCreate,
    WaitlistEntryResponse,
    PromotionSummary,
)
from seatwise.schemas.settings import (
    BlackoutCreate,
    CatalogSummary,
    DaySchedule,
    ResetResponse,
    RestaurantCreate,
    SectorCreate,
    ServiceWindowIn,
    StrategySummary,
    StrategyOptionView,
    StrategyUpdate,
    TableCreate,
)

__all__ = [
    "BookingCreate",
    "BookingApprove",
    "BookingResponse",
    "CandidateView",
    "CapacityView",
    "DiscoveryView",
    "RepackRequest",
    "RepackResponse",
    "WaitlistEntryCreate",
    "WaitlistEntryResponse",
    "PromotionSummary",
    "BlackoutCreate",
    "CatalogSummary",
    "DaySchedule",
    "ResetResponse",
    "RestaurantCreate",
    "SectorCreate",
    "ServiceWindowIn",
    "StrategySummary",
    "StrategyOptionView",
    "StrategyUpdate",
    "TableCreate",
]
