"""Partition production units by one shared attribute."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from shoot_scheduler.services.units import ProductionUnit


class RelationshipKey(str, Enum):
    SAME_USER = "same-user"
    SAME_LOCATION = "same-location"
    SAME_DATE = "same-date"
    SAME_EQUIPMENT = "same-equipment"
    SAME_CAST = "same-cast"
    SAME_TIME_OF_DAY = "same-time-of-day"


class CastKeyPolicy(str, Enum):
    """How a cast list becomes a single grouping key.

    ``sorted`` treats casts as sets, so ``["A", "B"]`` and ``["B", "A"]``
    share a group. ``ordered`` keeps the listed order and keeps them apart.
    """

    SORTED = "sorted"
    ORDERED = "ordered"


CAST_KEY_SEPARATOR = ","
_ESCAPE = "\\"


@dataclass
class Group:
    key: str
    members: list[ProductionUnit] = field(default_factory=list)

    @property
    def member_ids(self) -> list[str]:
        return [unit.id for unit in self.members]


def _escape_name(name: str) -> str:
    return name.replace(_ESCAPE, _ESCAPE * 2).replace(CAST_KEY_SEPARATOR, _ESCAPE + CAST_KEY_SEPARATOR)


def cast_key(cast: Iterable[str], policy: CastKeyPolicy | str = CastKeyPolicy.SORTED) -> str:
    """Join *cast* into one key; separators inside a name are backslash-escaped."""

    names = sorted(cast) if CastKeyPolicy(policy) is CastKeyPolicy.SORTED else list(cast)
    return CAST_KEY_SEPARATOR.join(_escape_name(name) for name in names)


def key_function(
    relationship: RelationshipKey,
    *,
    cast_policy: CastKeyPolicy = CastKeyPolicy.SORTED,
) -> Callable[[ProductionUnit], str]:
    relationship = RelationshipKey(relationship)
    if relationship is RelationshipKey.SAME_USER:
        return lambda unit: unit.user_id
    if relationship is RelationshipKey.SAME_LOCATION:
        return lambda unit: unit.keywords.location
    if relationship is RelationshipKey.SAME_DATE:
        return lambda unit: unit.keywords.date
    if relationship is RelationshipKey.SAME_EQUIPMENT:
        return lambda unit: unit.keywords.equipment
    if relationship is RelationshipKey.SAME_CAST:
        return lambda unit: cast_key(unit.keywords.cast, cast_policy)
    return lambda unit: unit.time_of_day.value


def group_by(
    units: Iterable[ProductionUnit],
    relationship: RelationshipKey | str,
    *,
    cast_policy: CastKeyPolicy | str = CastKeyPolicy.SORTED,
) -> dict[str, Group]:
    """Group *units* by *relationship*.

    Groups are returned in order of first appearance and members keep their
    input order. Units without a value land in the ``""`` group.
    """

    key_of = key_function(RelationshipKey(relationship), cast_policy=CastKeyPolicy(cast_policy))
    groups: dict[str, Group] = {}
    for unit in units:
        key = key_of(unit)
        group = groups.get(key)
        if group is None:
            group = groups[key] = Group(key=key)
        group.members.append(unit)
    return groups


def group_index(groups: dict[str, Group]) -> dict[str, list[str]]:
    """Return group key -> member ids, the shape schedules report."""

    return {key: group.member_ids for key, group in groups.items()}
