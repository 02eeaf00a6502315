"""Scalar scheduling priority for a production unit."""

from __future__ import annotations

from dataclasses import dataclass

from shoot_scheduler.core.errors import ConfigurationError
from shoot_scheduler.services.units import ProductionUnit


@dataclass(frozen=True)
class WeightMultipliers:
    """Multipliers applied to each weight, listed from most to least significant."""

    location: int = 1000
    cast: int = 500
    time: int = 200
    equipment: int = 100
    complexity: int = 50

    def __post_init__(self) -> None:
        ordered = self.ordered()
        if any(value <= 0 for value in ordered):
            raise ConfigurationError("weight multipliers must be positive")
        if any(higher <= lower for higher, lower in zip(ordered, ordered[1:])):
            raise ConfigurationError(
                "weight multipliers must strictly decrease from location to complexity"
            )

    def ordered(self) -> tuple[int, int, int, int, int]:
        return (self.location, self.cast, self.time, self.equipment, self.complexity)


DEFAULT_MULTIPLIERS = WeightMultipliers()


def score(unit: ProductionUnit, multipliers: WeightMultipliers = DEFAULT_MULTIPLIERS) -> int:
    weights = unit.weights
    return (
        weights.location_priority * multipliers.location
        + weights.cast_priority * multipliers.cast
        + weights.time_priority * multipliers.time
        + weights.equipment_priority * multipliers.equipment
        + weights.complexity * multipliers.complexity
    )
