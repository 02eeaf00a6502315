from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from shoot_scheduler.schemas.scene import ProductionUnitRead, SceneCardIn
from shoot_scheduler.services.breakdown import Breakdown
from shoot_scheduler.services.scheduler import Schedule, ScheduleDay, SchedulingConfig


class SchedulingConfigIn(BaseModel):
    """Per-request overrides; omitted fields fall back to the configured defaults."""

    max_daily_minutes: int | None = None
    max_weekly_minutes: int | None = None
    rest_day_interval: int | None = None
    scene_break_minutes: int | None = None
    max_scenes_per_day: int | None = None
    start_date: date | None = None
    strategy: Literal["greedy", "clustered"] | None = None

    def merge(self, defaults: SchedulingConfig) -> SchedulingConfig:
        overrides = self.model_dump(exclude_unset=True)
        values = {
            "max_daily_minutes": defaults.max_daily_minutes,
            "max_weekly_minutes": defaults.max_weekly_minutes,
            "rest_day_interval": defaults.rest_day_interval,
            "scene_break_minutes": defaults.scene_break_minutes,
            "max_scenes_per_day": defaults.max_scenes_per_day,
            "start_date": defaults.start_date,
            "strategy": defaults.strategy,
        }
        values.update(overrides)
        return SchedulingConfig(**values)


class ScheduleGenerationRequest(BaseModel):
    scenes: list[SceneCardIn] = Field(default_factory=list)
    config: SchedulingConfigIn | None = None
    # The fingerprint only covers scenes; set this after changing the config.
    force: bool = False


class GroupingRequest(BaseModel):
    scenes: list[SceneCardIn] = Field(default_factory=list)
    relationship: Literal[
        "same-user",
        "same-location",
        "same-date",
        "same-equipment",
        "same-cast",
        "same-time-of-day",
    ] = "same-location"
    cast_policy: Literal["sorted", "ordered"] | None = None


class GroupRead(BaseModel):
    key: str
    member_ids: list[str] = Field(default_factory=list)


class BreakdownRead(BaseModel):
    locations: list[str] = Field(default_factory=list)
    cast: list[str] = Field(default_factory=list)
    equipment: list[str] = Field(default_factory=list)
    props: list[str] = Field(default_factory=list)
    special_requirements: list[str] = Field(default_factory=list)

    @classmethod
    def from_breakdown(cls, breakdown: Breakdown) -> "BreakdownRead":
        return cls(
            locations=sorted(breakdown.locations),
            cast=sorted(breakdown.cast),
            equipment=sorted(breakdown.equipment),
            props=sorted(breakdown.props),
            special_requirements=sorted(breakdown.special_requirements),
        )


class TimeRangeRead(BaseModel):
    start: str
    end: str


class SceneSlotRead(BaseModel):
    unit_id: str
    scene_number: int
    start: str
    end: str
    duration_minutes: int


class ScheduleDayRead(BaseModel):
    day_index: int
    date_label: str
    location: str
    time_of_day: str
    time_range: TimeRangeRead
    scenes: list[ProductionUnitRead] = Field(default_factory=list)
    estimated_duration_minutes: int
    breakdown: BreakdownRead
    slots: list[SceneSlotRead] = Field(default_factory=list)
    oversized: bool = False

    @classmethod
    def from_day(cls, day: ScheduleDay) -> "ScheduleDayRead":
        return cls(
            day_index=day.day_index,
            date_label=day.date_label,
            location=day.location,
            time_of_day=day.time_of_day.value,
            time_range=TimeRangeRead(start=day.time_range.start, end=day.time_range.end),
            scenes=[ProductionUnitRead.from_unit(unit) for unit in day.scenes],
            estimated_duration_minutes=day.estimated_duration_minutes,
            breakdown=BreakdownRead.from_breakdown(day.breakdown),
            slots=[
                SceneSlotRead(
                    unit_id=slot.unit_id,
                    scene_number=slot.scene_number,
                    start=slot.start,
                    end=slot.end,
                    duration_minutes=slot.duration_minutes,
                )
                for slot in day.slots
            ],
            oversized=day.oversized,
        )


class ScheduleRead(BaseModel):
    days: list[ScheduleDayRead] = Field(default_factory=list)
    total_days: int = 0
    total_scenes: int = 0
    total_duration_minutes: int = 0
    content_fingerprint: str = ""
    optimization_score: int = 0
    rest_day_indices: list[int] = Field(default_factory=list)
    breakdown: BreakdownRead = Field(default_factory=BreakdownRead)
    breakdown_index: dict[str, dict[str, list[int]]] = Field(default_factory=dict)
    location_groups: dict[str, list[str]] = Field(default_factory=dict)
    equipment_groups: dict[str, list[str]] = Field(default_factory=dict)
    oversized_unit_ids: list[str] = Field(default_factory=list)
    strategy: Literal["greedy", "clustered"] = "greedy"

    @classmethod
    def from_schedule(cls, schedule: Schedule) -> "ScheduleRead":
        return cls(
            days=[ScheduleDayRead.from_day(day) for day in schedule.days],
            total_days=schedule.total_days,
            total_scenes=schedule.total_scenes,
            total_duration_minutes=schedule.total_duration_minutes,
            content_fingerprint=schedule.content_fingerprint,
            optimization_score=schedule.optimization_score,
            rest_day_indices=list(schedule.rest_day_indices),
            breakdown=BreakdownRead.from_breakdown(schedule.breakdown),
            breakdown_index={
                category: {item: list(scenes) for item, scenes in items.items()}
                for category, items in schedule.breakdown_index.items()
            },
            location_groups=dict(schedule.location_groups),
            equipment_groups=dict(schedule.equipment_groups),
            oversized_unit_ids=list(schedule.oversized_unit_ids),
            strategy=schedule.strategy,
        )


class ScheduleGenerationResponse(BaseModel):
    project_id: str
    version_label: str
    reused: bool = False
    schedule: ScheduleRead


class ScheduleVersionRead(BaseModel):
    id: int
    project_id: str
    version_label: str
    content_fingerprint: str
    total_days: int
    total_scenes: int
    total_duration_minutes: int
    optimization_score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
