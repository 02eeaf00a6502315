"""Production units and the normalizer that builds them from raw scene records.

Scene records arrive from the scene editor in whatever shape the editor last
saved them in. Every default the engine relies on is applied here, once, so
the rest of the engine can trust the fields it reads.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping, Sequence

from shoot_scheduler.core.errors import NormalizationObserver, NormalizationWarning

logger = logging.getLogger(__name__)


class TimeOfDay(str, Enum):
    DAWN = "dawn"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"
    DAY = "day"


DEFAULT_TIME_OF_DAY = TimeOfDay.AFTERNOON
DEFAULT_DURATION_MINUTES = 5
DEFAULT_WEIGHT = 1
MIN_WEIGHT = 1
MAX_WEIGHT = 5

TIME_OF_DAY_ALIASES: dict[str, TimeOfDay] = {
    "새벽": TimeOfDay.DAWN,
    "오전": TimeOfDay.MORNING,
    "아침": TimeOfDay.MORNING,
    "오후": TimeOfDay.AFTERNOON,
    "저녁": TimeOfDay.EVENING,
    "밤": TimeOfDay.NIGHT,
    "낮": TimeOfDay.DAY,
}

# Values the scene editor stores when no keyword was chosen.
PLACEHOLDER_KEYWORDS = frozenset({"기본 장소", "기본 장비", "미정"})

WEIGHT_FIELDS = (
    "locationPriority",
    "equipmentPriority",
    "castPriority",
    "timePriority",
    "complexity",
)

_INTEGER_PATTERN = re.compile(r"\d+")


@dataclass(frozen=True)
class Keywords:
    location: str = ""
    date: str = ""
    equipment: str = ""
    cast: tuple[str, ...] = ()
    props: tuple[str, ...] = ()
    special_requirements: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnitWeights:
    location_priority: int = DEFAULT_WEIGHT
    equipment_priority: int = DEFAULT_WEIGHT
    cast_priority: int = DEFAULT_WEIGHT
    time_priority: int = DEFAULT_WEIGHT
    complexity: int = DEFAULT_WEIGHT

    def as_tuple(self) -> tuple[int, int, int, int, int]:
        return (
            self.location_priority,
            self.equipment_priority,
            self.cast_priority,
            self.time_priority,
            self.complexity,
        )


@dataclass(frozen=True)
class ProductionUnit:
    id: str
    scene_number: int
    title: str = ""
    estimated_duration_minutes: int = DEFAULT_DURATION_MINUTES
    time_of_day: TimeOfDay = DEFAULT_TIME_OF_DAY
    keywords: Keywords = field(default_factory=Keywords)
    weights: UnitWeights = field(default_factory=UnitWeights)
    user_id: str = ""

    @property
    def location(self) -> str:
        return self.keywords.location

    @property
    def equipment(self) -> str:
        return self.keywords.equipment


def _log_warning(warning: NormalizationWarning) -> None:
    logger.debug(
        "unit %s: %s=%r replaced with %r",
        warning.unit_id,
        warning.field,
        warning.raw_value,
        warning.default,
    )


class _Reporter:
    def __init__(self, unit_id: str, observer: NormalizationObserver | None) -> None:
        self.unit_id = unit_id
        self.observer = observer or _log_warning

    def __call__(self, field_name: str, raw_value: Any, default: Any) -> None:
        self.observer(NormalizationWarning(self.unit_id, field_name, raw_value, default))


def parse_duration_minutes(raw: Any) -> int | None:
    """Return the duration in minutes, or None when *raw* carries no usable number.

    Free text such as ``"5분"`` or ``"about 12 min"`` yields its first integer.
    """

    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and not math.isfinite(raw):
            return None
        value = int(round(raw))
    elif isinstance(raw, str):
        match = _INTEGER_PATTERN.search(raw)
        if not match:
            return None
        value = int(match.group(0))
    else:
        return None
    return value if value > 0 else None


def coerce_time_of_day(raw: Any) -> TimeOfDay | None:
    if isinstance(raw, TimeOfDay):
        return raw
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if text in TIME_OF_DAY_ALIASES:
        return TIME_OF_DAY_ALIASES[text]
    try:
        return TimeOfDay(text.lower())
    except ValueError:
        return None


def coerce_weight(raw: Any) -> int | None:
    """Clamp a weight into [1, 5]; None when *raw* is not numeric."""

    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, str):
        try:
            raw = float(raw.strip())
        except ValueError:
            return None
    if not isinstance(raw, (int, float)) or not math.isfinite(raw):
        return None
    return max(MIN_WEIGHT, min(MAX_WEIGHT, int(round(raw))))


def _keyword_text(raw: Any) -> str:
    if raw is None:
        return ""
    text = str(raw).strip()
    return "" if text in PLACEHOLDER_KEYWORDS else text


def _keyword_list(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        items: Iterable[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = raw
    else:
        items = (raw,)
    values = (str(item).strip() for item in items if item is not None)
    return tuple(value for value in values if value)


def _scene_number(raw: Any) -> int | None:
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, str):
        match = _INTEGER_PATTERN.search(raw)
        raw = int(match.group(0)) if match else None
    if isinstance(raw, float) and math.isfinite(raw):
        raw = int(raw)
    if isinstance(raw, int) and raw >= 1:
        return raw
    return None


def normalize_unit(
    record: Mapping[str, Any],
    *,
    position: int = 1,
    observer: NormalizationObserver | None = None,
) -> ProductionUnit:
    """Build a :class:`ProductionUnit` from a raw camelCase scene record.

    *position* is the 1-based index of the record in its collection and is
    used when the record has no id or scene number of its own.
    """

    unit_id = str(record.get("id") or record.get("_id") or f"unit-{position}")
    report = _Reporter(unit_id, observer)

    raw_scene = record.get("sceneNumber", record.get("scene"))
    scene_number = _scene_number(raw_scene)
    if scene_number is None:
        scene_number = position
        report("sceneNumber", raw_scene, scene_number)

    raw_duration = record.get("estimatedDurationMinutes", record.get("estimatedDuration"))
    duration = parse_duration_minutes(raw_duration)
    if duration is None:
        duration = DEFAULT_DURATION_MINUTES
        report("estimatedDurationMinutes", raw_duration, duration)

    raw_keywords = record.get("keywords") or {}
    if not isinstance(raw_keywords, Mapping):
        report("keywords", raw_keywords, {})
        raw_keywords = {}

    raw_time = record.get("timeOfDay") or raw_keywords.get("timeOfDay")
    time_of_day = coerce_time_of_day(raw_time)
    if time_of_day is None:
        time_of_day = DEFAULT_TIME_OF_DAY
        report("timeOfDay", raw_time, time_of_day.value)

    keywords = Keywords(
        location=_keyword_text(raw_keywords.get("location")),
        date=_keyword_text(raw_keywords.get("date")),
        equipment=_keyword_text(raw_keywords.get("equipment")),
        cast=_keyword_list(raw_keywords.get("cast")),
        props=_keyword_list(raw_keywords.get("props")),
        special_requirements=_keyword_list(raw_keywords.get("specialRequirements")),
    )

    raw_weights = record.get("weights") or {}
    if not isinstance(raw_weights, Mapping):
        report("weights", raw_weights, {})
        raw_weights = {}
    weight_values: list[int] = []
    for name in WEIGHT_FIELDS:
        raw_weight = raw_weights.get(name)
        value = coerce_weight(raw_weight)
        if value is None:
            value = DEFAULT_WEIGHT
            report(f"weights.{name}", raw_weight, value)
        weight_values.append(value)
    location_priority, equipment_priority, cast_priority, time_priority, complexity = weight_values

    return ProductionUnit(
        id=unit_id,
        scene_number=scene_number,
        title=str(record.get("title") or ""),
        estimated_duration_minutes=duration,
        time_of_day=time_of_day,
        keywords=keywords,
        weights=UnitWeights(
            location_priority=location_priority,
            equipment_priority=equipment_priority,
            cast_priority=cast_priority,
            time_priority=time_priority,
            complexity=complexity,
        ),
        user_id=str(record.get("userId") or ""),
    )


def normalize_units(
    records: Sequence[Mapping[str, Any]],
    *,
    observer: NormalizationObserver | None = None,
) -> list[ProductionUnit]:
    return [
        normalize_unit(record, position=index, observer=observer)
        for index, record in enumerate(records, start=1)
    ]
