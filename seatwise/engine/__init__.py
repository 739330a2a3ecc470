"""Availability engine: gaps, combos, capacity strategies, discovery, repacking"""

from seatwise.engine.capacity import (
    CapacityRange,
    CapacityStrategyRouter,
    StrategyKey,
    StrategyOption,
)
from seatwise.engine.combos import generate_combos
from seatwise.engine.discovery import (
    Candidate,
    DiscoveryEngine,
    DiscoveryRequest,
    DiscoveryResult,
    NoCapacityReason,
)
from seatwise.engine.gaps import GapFinder, Interval
from seatwise.engine.repack import RepackOptimizer

__all__ = [
    "CapacityRange",
    "CapacityStrategyRouter",
    "StrategyKey",
    "StrategyOption",
    "generate_combos",
    "Candidate",
    "DiscoveryEngine",
    "DiscoveryRequest",
    "DiscoveryResult",
    "NoCapacityReason",
    "GapFinder",
    "Interval",
    "RepackOptimizer",
]
