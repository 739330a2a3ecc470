"""Catalog and capacity strategy API endpoints"""

from fastapi import APIRouter, Depends, Response

from seatwise.models import Blackout
from seatwise.schemas.settings import (
    BlackoutCreate,
    CatalogSummary,
    ResetResponse,
    RestaurantCreate,
    StrategySummary,
    StrategyUpdate,
    TableCreate,
)
from seatwise.state import AppState, get_state

router = APIRouter()


@router.get("/strategy", response_model=StrategySummary)
async def get_strategy(state: AppState = Depends(get_state)):
    return state.catalog.strategy_summary()


@router.put("/strategy", response_model=StrategySummary)
async def update_strategy(update: StrategyUpdate, state: AppState = Depends(get_state)):
    """Switch the capacity strategy; unknown keys fall back to simple"""
    return state.catalog.update_strategy(update.key)


@router.get("/catalog", response_model=CatalogSummary)
async def get_catalog(state: AppState = Depends(get_state)):
    return state.catalog.catalog()


@router.post("/restaurants", response_model=CatalogSummary, status_code=201)
async def create_restaurant(restaurant_data: RestaurantCreate, state: AppState = Depends(get_state)):
    return state.catalog.create_restaurant(restaurant_data)


@router.post("/tables", response_model=CatalogSummary, status_code=201)
async def create_table(table_data: TableCreate, state: AppState = Depends(get_state)):
    return state.catalog.create_table(table_data)


@router.post("/blackouts", response_model=Blackout, status_code=201)
async def create_blackout(blackout_data: BlackoutCreate, state: AppState = Depends(get_state)):
    return state.catalog.create_blackout(blackout_data)


@router.delete("/blackouts/{blackout_id}", status_code=204)
async def remove_blackout(blackout_id: str, state: AppState = Depends(get_state)):
    state.catalog.remove_blackout(blackout_id)
    return Response(status_code=204)


@router.post("/reset", response_model=ResetResponse)
async def reset(state: AppState = Depends(get_state)):
    """Wipe the catalog, bookings and waitlist, and clear caches and locks"""
    return state.catalog.reset()
