"""Resource breakdowns for a day or for a whole schedule."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from shoot_scheduler.services.units import ProductionUnit

BREAKDOWN_CATEGORIES = (
    "locations",
    "cast",
    "equipment",
    "props",
    "special_requirements",
    "time_of_day",
)


@dataclass
class Breakdown:
    locations: set[str] = field(default_factory=set)
    cast: set[str] = field(default_factory=set)
    equipment: set[str] = field(default_factory=set)
    props: set[str] = field(default_factory=set)
    special_requirements: set[str] = field(default_factory=set)


def aggregate(units: Iterable[ProductionUnit]) -> Breakdown:
    """Collect the distinct resources *units* need.

    Empty location and equipment strings are kept as ``""`` members.
    """

    breakdown = Breakdown()
    for unit in units:
        keywords = unit.keywords
        breakdown.locations.add(keywords.location)
        breakdown.equipment.add(keywords.equipment)
        breakdown.cast.update(keywords.cast)
        breakdown.props.update(keywords.props)
        breakdown.special_requirements.update(keywords.special_requirements)
    return breakdown


def build_breakdown_index(units: Iterable[ProductionUnit]) -> dict[str, dict[str, list[int]]]:
    """Map category -> item -> scene numbers that need the item.

    Scene numbers appear in input order and at most once per item.
    """

    index: dict[str, dict[str, list[int]]] = {category: {} for category in BREAKDOWN_CATEGORIES}

    def _add(category: str, item: str, scene_number: int) -> None:
        scenes = index[category].setdefault(item, [])
        if scene_number not in scenes:
            scenes.append(scene_number)

    for unit in units:
        keywords = unit.keywords
        _add("locations", keywords.location, unit.scene_number)
        _add("equipment", keywords.equipment, unit.scene_number)
        _add("time_of_day", unit.time_of_day.value, unit.scene_number)
        for member in keywords.cast:
            _add("cast", member, unit.scene_number)
        for prop in keywords.props:
            _add("props", prop, unit.scene_number)
        for requirement in keywords.special_requirements:
            _add("special_requirements", requirement, unit.scene_number)
    return index
