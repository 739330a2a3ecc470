"""Capacity strategies for table combos"""

import enum
from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Optional, Sequence
import structlog

from seatwise.models import Table

logger = structlog.get_logger()


class CapacityRange(NamedTuple):
    """Party sizes a combo can seat"""
    min: int
    max: int

    def admits(self, party_size: int) -> bool:
        return self.min <= party_size <= self.max


class StrategyKey(str, enum.Enum):
    SIMPLE = "simple"
    CONSERVATIVE = "conservative"
    MAX_OF_MINS = "maxofmins"


DEFAULT_STRATEGY = StrategyKey.SIMPLE


class StrategyOption(NamedTuple):
    key: str
    label: str
    description: str


class BaseCapacityStrategy(ABC):
    """Abstract base class for capacity strategies"""

    key: StrategyKey
    label: str
    description: str

    @abstractmethod
    def calculate(self, tables: Sequence[Table]) -> CapacityRange:
        """Seating range of the combined tables"""
        pass

    @property
    def option(self) -> StrategyOption:
        return StrategyOption(self.key.value, self.label, self.description)


class SimpleSumStrategy(BaseCapacityStrategy):
    """Adds up the individual ranges"""
    key = StrategyKey.SIMPLE
    label = "Simple Sum"
    description = "Adds each table's min/max seats and fits the party in the combined range."

    def calculate(self, tables: Sequence[Table]) -> CapacityRange:
        return CapacityRange(
            sum(t.min_capacity for t in tables),
            sum(t.max_capacity for t in tables),
        )


class ConservativeMergeStrategy(BaseCapacityStrategy):
    """Keeps the summed minimum, trims 10% off the summed maximum"""
    key = StrategyKey.CONSERVATIVE
    label = "Conservative Merge"
    description = "Uses full min capacity but trims 10% of the max capacity to keep some buffer."

    def calculate(self, tables: Sequence[Table]) -> CapacityRange:
        total_max = sum(t.max_capacity for t in tables)
        # floor(0.9 * total) in integer arithmetic
        return CapacityRange(
            sum(t.min_capacity for t in tables),
            total_max * 9 // 10,
        )


class MaxOfMinsStrategy(BaseCapacityStrategy):
    """Largest individual minimum, summed maximum"""
    key = StrategyKey.MAX_OF_MINS
    label = "Max of Minimums"
    description = "Takes the highest minimum seat count to avoid under-seating large parties."

    def calculate(self, tables: Sequence[Table]) -> CapacityRange:
        if not tables:
            return CapacityRange(0, 0)
        return CapacityRange(
            max(t.min_capacity for t in tables),
            sum(t.max_capacity for t in tables),
        )


STRATEGIES: Dict[StrategyKey, BaseCapacityStrategy] = {
    strategy.key: strategy
    for strategy in (SimpleSumStrategy(), ConservativeMergeStrategy(), MaxOfMinsStrategy())
}


def resolve_strategy_key(name: Optional[str]) -> StrategyKey:
    """Registry lookup by name; unknown or empty names fall back to simple"""
    if not name:
        return DEFAULT_STRATEGY
    try:
        return StrategyKey(name.strip().lower())
    except ValueError:
        return DEFAULT_STRATEGY


class CapacityStrategyRouter:
    """
    Routes capacity calculations to the currently selected strategy.
    Switching takes effect for every later calculation.
    """

    def __init__(self, initial: Optional[str] = None):
        self._current = resolve_strategy_key(initial)

    @property
    def current_key(self) -> StrategyKey:
        return self._current

    @property
    def current(self) -> BaseCapacityStrategy:
        return STRATEGIES[self._current]

    def calculate(self, tables: Sequence[Table]) -> CapacityRange:
        return self.current.calculate(tables)

    def set_strategy(self, name: Optional[str]) -> StrategyOption:
        previous = self._current
        self._current = resolve_strategy_key(name)
        if previous != self._current:
            logger.info(
                "Capacity strategy switched",
                requested=name,
                previous=previous.value,
                current=self._current.value,
            )
        return self.current.option

    def current_option(self) -> StrategyOption:
        return self.current.option

    def available_options(self) -> List[StrategyOption]:
        return [strategy.option for strategy in STRATEGIES.values()]
