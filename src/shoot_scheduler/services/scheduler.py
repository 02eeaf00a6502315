from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import TYPE_CHECKING, Literal, Sequence

from shoot_scheduler.core.errors import ConfigurationError
from shoot_scheduler.services.breakdown import Breakdown, aggregate, build_breakdown_index
from shoot_scheduler.services.fingerprint import fingerprint
from shoot_scheduler.services.grouping import Group, RelationshipKey, group_by, group_index
from shoot_scheduler.services.units import ProductionUnit, TimeOfDay
from shoot_scheduler.services.weights import DEFAULT_MULTIPLIERS, WeightMultipliers, score

if TYPE_CHECKING:
    from shoot_scheduler.core.config import Settings

logger = logging.getLogger(__name__)

ScheduleStrategy = Literal["greedy", "clustered"]
SCHEDULE_STRATEGIES: tuple[str, ...] = ("greedy", "clustered")
_REQUIRED_INT_FIELDS = ("max_daily_minutes", "rest_day_interval", "scene_break_minutes")
_OPTIONAL_INT_FIELDS = ("max_weekly_minutes", "max_scenes_per_day")

MINUTES_PER_DAY = 24 * 60
WEEK_LENGTH_DAYS = 7

DAYLIGHT_SLOTS = frozenset({TimeOfDay.DAY, TimeOfDay.MORNING, TimeOfDay.AFTERNOON})
DAYLIGHT_RANGE = ("06:00", "18:00")
NIGHT_RANGE = ("18:00", "06:00")


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class SchedulingConfig:
    max_daily_minutes: int = 480
    max_weekly_minutes: int | None = 2880
    rest_day_interval: int = 6
    scene_break_minutes: int = 0
    max_scenes_per_day: int | None = None
    start_date: date | None = None
    strategy: ScheduleStrategy = "greedy"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in _REQUIRED_INT_FIELDS:
            if not _is_int(getattr(self, name)):
                raise ConfigurationError(f"{name} must be an integer")
        for name in _OPTIONAL_INT_FIELDS:
            value = getattr(self, name)
            if value is not None and not _is_int(value):
                raise ConfigurationError(f"{name} must be an integer or null")
        if self.max_daily_minutes <= 0:
            raise ConfigurationError("max_daily_minutes must be positive")
        if self.max_weekly_minutes is not None and self.max_weekly_minutes <= 0:
            raise ConfigurationError("max_weekly_minutes must be positive when set")
        if self.rest_day_interval < 0:
            raise ConfigurationError("rest_day_interval cannot be negative")
        if self.scene_break_minutes < 0:
            raise ConfigurationError("scene_break_minutes cannot be negative")
        if self.max_scenes_per_day is not None and self.max_scenes_per_day < 1:
            raise ConfigurationError("max_scenes_per_day must be at least 1 when set")
        if self.strategy not in SCHEDULE_STRATEGIES:
            raise ConfigurationError(f"unknown schedule strategy {self.strategy!r}")

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SchedulingConfig":
        return cls(
            max_daily_minutes=settings.max_daily_minutes,
            max_weekly_minutes=settings.max_weekly_minutes,
            rest_day_interval=settings.rest_day_interval,
            scene_break_minutes=settings.scene_break_minutes,
            max_scenes_per_day=settings.max_scenes_per_day,
            strategy=settings.schedule_strategy,
        )


@dataclass(frozen=True)
class TimeRange:
    start: str
    end: str


@dataclass(frozen=True)
class SceneSlot:
    unit_id: str
    scene_number: int
    start: str
    end: str
    duration_minutes: int


@dataclass
class ScheduleDay:
    day_index: int
    date_label: str
    location: str
    time_of_day: TimeOfDay
    time_range: TimeRange
    scenes: list[ProductionUnit] = field(default_factory=list)
    estimated_duration_minutes: int = 0
    breakdown: Breakdown = field(default_factory=Breakdown)
    slots: list[SceneSlot] = field(default_factory=list)
    oversized: bool = False

    @property
    def scene_ids(self) -> list[str]:
        return [unit.id for unit in self.scenes]


@dataclass
class Schedule:
    days: list[ScheduleDay] = field(default_factory=list)
    total_days: int = 0
    total_scenes: int = 0
    total_duration_minutes: int = 0
    content_fingerprint: str = ""
    optimization_score: int = 0
    rest_day_indices: list[int] = field(default_factory=list)
    breakdown: Breakdown = field(default_factory=Breakdown)
    breakdown_index: dict[str, dict[str, list[int]]] = field(default_factory=dict)
    location_groups: dict[str, list[str]] = field(default_factory=dict)
    equipment_groups: dict[str, list[str]] = field(default_factory=dict)
    oversized_unit_ids: list[str] = field(default_factory=list)
    strategy: ScheduleStrategy = "greedy"


def add_minutes(clock: str, minutes: int) -> str:
    """Add *minutes* to an ``HH:MM`` clock time, wrapping past midnight."""

    hours, mins = (int(part) for part in clock.split(":"))
    total = (hours * 60 + mins + minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def time_range_for(time_of_day: TimeOfDay) -> TimeRange:
    start, end = DAYLIGHT_RANGE if time_of_day in DAYLIGHT_SLOTS else NIGHT_RANGE
    return TimeRange(start=start, end=end)


def order_units(
    units: Sequence[ProductionUnit],
    multipliers: WeightMultipliers = DEFAULT_MULTIPLIERS,
) -> list[tuple[ProductionUnit, int]]:
    """Return ``(unit, score)`` pairs by descending score, then ascending scene number."""

    scored = [(unit, score(unit, multipliers)) for unit in units]
    return sorted(scored, key=lambda pair: (-pair[1], pair[0].scene_number))


@dataclass
class _OpenDay:
    day_index: int
    break_minutes: int
    units: list[ProductionUnit] = field(default_factory=list)
    minutes: int = 0

    @property
    def location(self) -> str:
        return self.units[0].keywords.location if self.units else ""

    def minutes_with(self, unit: ProductionUnit) -> int:
        gap = self.break_minutes if self.units else 0
        return self.minutes + gap + unit.estimated_duration_minutes

    def add(self, unit: ProductionUnit) -> None:
        self.minutes = self.minutes_with(unit)
        self.units.append(unit)


@dataclass
class _Calendar:
    """Hands out day indices, inserting rest days and tracking the weekly window."""

    config: SchedulingConfig
    days: list[ScheduleDay] = field(default_factory=list)
    rest_day_indices: list[int] = field(default_factory=list)
    next_index: int = 1
    week_start: int = 1
    week_minutes: int = 0
    rest_due: bool = False
    new_week_due: bool = False

    def exceeds_week(self, minutes: int) -> bool:
        cap = self.config.max_weekly_minutes
        return cap is not None and self.week_minutes + minutes > cap

    def open(self, first_minutes: int) -> _OpenDay:
        if self.rest_due:
            self.rest_day_indices.append(self.next_index)
            self.next_index += 1
            self.rest_due = False
        window_elapsed = self.next_index >= self.week_start + WEEK_LENGTH_DAYS
        if (
            self.new_week_due
            or window_elapsed
            or (self.week_minutes > 0 and self.exceeds_week(first_minutes))
        ):
            self.week_start = self.next_index
            self.week_minutes = 0
            self.new_week_due = False
        day = _OpenDay(day_index=self.next_index, break_minutes=self.config.scene_break_minutes)
        self.next_index += 1
        return day

    def commit(self, open_day: _OpenDay) -> ScheduleDay:
        day = _build_day(open_day, self.config)
        self.days.append(day)
        self.week_minutes += day.estimated_duration_minutes
        interval = self.config.rest_day_interval
        if interval and len(self.days) % interval == 0:
            self.rest_due = True
        logger.debug(
            "closed day %s at %s with %s scenes (%s min)",
            day.day_index,
            day.location or "<unassigned>",
            len(day.scenes),
            day.estimated_duration_minutes,
        )
        return day


def _date_label(day_index: int, start_date: date | None) -> str:
    if start_date is None:
        return f"Day {day_index}"
    return (start_date + timedelta(days=day_index - 1)).isoformat()


def _build_slots(units: Sequence[ProductionUnit], start: str, break_minutes: int) -> list[SceneSlot]:
    slots: list[SceneSlot] = []
    clock = start
    for unit in units:
        duration = unit.estimated_duration_minutes
        end = add_minutes(clock, duration)
        slots.append(
            SceneSlot(
                unit_id=unit.id,
                scene_number=unit.scene_number,
                start=clock,
                end=end,
                duration_minutes=duration,
            )
        )
        clock = add_minutes(end, break_minutes)
    return slots


def _build_day(open_day: _OpenDay, config: SchedulingConfig) -> ScheduleDay:
    first = open_day.units[0]
    time_range = time_range_for(first.time_of_day)
    return ScheduleDay(
        day_index=open_day.day_index,
        date_label=_date_label(open_day.day_index, config.start_date),
        location=first.keywords.location,
        time_of_day=first.time_of_day,
        time_range=time_range,
        scenes=list(open_day.units),
        estimated_duration_minutes=open_day.minutes,
        breakdown=aggregate(open_day.units),
        slots=_build_slots(open_day.units, time_range.start, config.scene_break_minutes),
        oversized=any(
            unit.estimated_duration_minutes > config.max_daily_minutes for unit in open_day.units
        ),
    )


def _must_close(
    current: _OpenDay,
    unit: ProductionUnit,
    config: SchedulingConfig,
    calendar: _Calendar,
) -> bool:
    if unit.keywords.location != current.location:
        return True
    if current.minutes_with(unit) > config.max_daily_minutes:
        return True
    if config.max_scenes_per_day is not None and len(current.units) >= config.max_scenes_per_day:
        return True
    if calendar.exceeds_week(current.minutes_with(unit)):
        calendar.new_week_due = True
        return True
    return False


def _schedule_greedy(ordered: Sequence[ProductionUnit], calendar: _Calendar) -> None:
    config = calendar.config
    current: _OpenDay | None = None
    for unit in ordered:
        if current is not None and _must_close(current, unit, config, calendar):
            calendar.commit(current)
            current = None
        if current is None:
            current = calendar.open(unit.estimated_duration_minutes)
        current.add(unit)
    if current is not None:
        calendar.commit(current)


def _pack_cluster(
    members: Sequence[ProductionUnit],
    config: SchedulingConfig,
    equipment_rank: dict[str, int],
) -> list[list[ProductionUnit]]:
    """First-fit-decreasing by duration; each bin is one shooting day."""

    bins: list[_OpenDay] = []
    for unit in sorted(members, key=lambda item: -item.estimated_duration_minutes):
        for candidate in bins:
            fits = candidate.minutes_with(unit) <= config.max_daily_minutes
            has_room = config.max_scenes_per_day is None or len(candidate.units) < config.max_scenes_per_day
            if fits and has_room:
                candidate.add(unit)
                break
        else:
            new_bin = _OpenDay(day_index=0, break_minutes=config.scene_break_minutes)
            new_bin.add(unit)
            bins.append(new_bin)
    # Keep units sharing equipment next to each other inside a day.
    return [
        sorted(day.units, key=lambda item: equipment_rank[item.keywords.equipment])
        for day in bins
    ]


def _schedule_clustered(
    calendar: _Calendar,
    location_groups: dict[str, Group],
    equipment_groups: dict[str, Group],
) -> None:
    config = calendar.config
    equipment_rank = {key: rank for rank, key in enumerate(equipment_groups)}
    for group in location_groups.values():
        for members in _pack_cluster(group.members, config, equipment_rank):
            total = sum(unit.estimated_duration_minutes for unit in members)
            total += config.scene_break_minutes * (len(members) - 1)
            open_day = calendar.open(total)
            for unit in members:
                open_day.add(unit)
            calendar.commit(open_day)


def build_schedule(
    units: Sequence[ProductionUnit],
    config: SchedulingConfig | None = None,
    *,
    multipliers: WeightMultipliers = DEFAULT_MULTIPLIERS,
    content_fingerprint: str | None = None,
) -> Schedule:
    """
    Assign *units* to shooting days.

    Units are walked in priority order. A day closes when the next unit
    would overrun the daily cap, shoots at another location, exceeds the
    per-day scene limit, or would push the current seven-day window past
    the weekly cap. A unit longer than the daily cap gets a day of its
    own. Rest days consume a day index but hold no units.
    """

    if config is None:
        config = SchedulingConfig()
    config.validate()

    if content_fingerprint is None:
        content_fingerprint = fingerprint(units)

    scored = order_units(units, multipliers)
    ordered = [unit for unit, _ in scored]
    location_groups = group_by(ordered, RelationshipKey.SAME_LOCATION)
    equipment_groups = group_by(ordered, RelationshipKey.SAME_EQUIPMENT)

    calendar = _Calendar(config=config)
    if config.strategy == "clustered":
        _schedule_clustered(calendar, location_groups, equipment_groups)
    else:
        _schedule_greedy(ordered, calendar)

    days = calendar.days
    schedule = Schedule(
        days=days,
        total_days=len(days),
        total_scenes=sum(len(day.scenes) for day in days),
        total_duration_minutes=sum(day.estimated_duration_minutes for day in days),
        content_fingerprint=content_fingerprint,
        optimization_score=sum(unit_score for _, unit_score in scored),
        rest_day_indices=list(calendar.rest_day_indices),
        breakdown=aggregate(units),
        breakdown_index=build_breakdown_index(units),
        location_groups=group_index(location_groups),
        equipment_groups=group_index(equipment_groups),
        oversized_unit_ids=[
            unit.id for unit in ordered if unit.estimated_duration_minutes > config.max_daily_minutes
        ],
        strategy=config.strategy,
    )
    logger.debug(
        "scheduled %s scenes over %s days (%s rest days, strategy=%s)",
        schedule.total_scenes,
        schedule.total_days,
        len(schedule.rest_day_indices),
        schedule.strategy,
    )
    return schedule
