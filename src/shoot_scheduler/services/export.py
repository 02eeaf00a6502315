"""CSV exports for call sheets and breakdown reports."""

from __future__ import annotations

import csv
import io
from typing import Mapping

from shoot_scheduler.schemas.schedule import ScheduleRead

SCHEDULE_HEADER = [
    "Day",
    "Date",
    "Location",
    "Time of day",
    "Scenes",
    "Estimated duration (min)",
    "Cast",
    "Equipment",
]
BREAKDOWN_HEADER = ["Category", "Item", "Scenes", "Count"]


def schedule_to_csv(schedule: ScheduleRead) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(SCHEDULE_HEADER)
    for day in schedule.days:
        writer.writerow(
            [
                day.day_index,
                day.date_label,
                day.location,
                day.time_of_day,
                ", ".join(str(scene.scene_number) for scene in day.scenes),
                day.estimated_duration_minutes,
                ", ".join(day.breakdown.cast),
                ", ".join(item for item in day.breakdown.equipment if item),
            ]
        )
    return buffer.getvalue()


def breakdown_to_csv(index: Mapping[str, Mapping[str, list[int]]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(BREAKDOWN_HEADER)
    for category, items in index.items():
        for item, scenes in items.items():
            writer.writerow([category, item, ", ".join(str(scene) for scene in scenes), len(scenes)])
    return buffer.getvalue()
