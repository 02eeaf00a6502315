"""Seed a demo project with a computed shoot schedule for local development.

Run this after applying Alembic migrations:

    python -m alembic upgrade head
    python scripts/seed_demo.py
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import date, timedelta
from itertools import cycle, islice
from typing import Any

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from shoot_scheduler.core.config import get_settings
from shoot_scheduler.core.logging import configure_logging
from shoot_scheduler.repositories import schedule as schedule_repo
from shoot_scheduler.schemas.schedule import ScheduleRead
from shoot_scheduler.services.planner import plan_schedule
from shoot_scheduler.services.scheduler import SchedulingConfig
from shoot_scheduler.services.units import normalize_units

DEMO_PROJECT_ID = "demo-film"

LOCATIONS = ["카페", "옥상", "지하철역", "기본 장소"]
TIMES = ["오전", "오후", "밤", "저녁"]
EQUIPMENT = ["달리", "크레인", "핸드헬드", "기본 장비"]
CAST = [["민지", "서준"], ["서준"], ["민지", "하윤"], ["하윤", "서준", "민지"], []]
PROPS = [["우산"], ["커피잔", "노트북"], [], ["자전거"]]


def _build_demo_scenes(count: int = 18) -> list[dict[str, Any]]:
    scenes: list[dict[str, Any]] = []
    rows = zip(
        islice(cycle(LOCATIONS), count),
        islice(cycle(TIMES), count),
        islice(cycle(EQUIPMENT), count),
        islice(cycle(CAST), count),
        islice(cycle(PROPS), count),
    )
    for number, (location, time_of_day, equipment, cast, props) in enumerate(rows, start=1):
        scenes.append(
            {
                "id": f"demo-scene-{number}",
                "sceneNumber": number,
                "title": f"씬 {number}",
                "estimatedDuration": f"{30 + (number * 17) % 150}분",
                "keywords": {
                    "location": location,
                    "equipment": equipment,
                    "cast": cast,
                    "props": props,
                    "timeOfDay": time_of_day,
                    "specialRequirements": ["우천 장면"] if number % 7 == 0 else [],
                },
                "weights": {
                    "locationPriority": 1 + number % 5,
                    "castPriority": 1 + (number // 2) % 5,
                    "timePriority": 1 + (number // 3) % 5,
                    "equipmentPriority": 2,
                    "complexity": 1 + number % 3,
                },
                "userId": "demo-user",
            }
        )
    return scenes


async def seed() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    engine = create_async_engine(settings.database_url, future=True)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    config = replace(
        SchedulingConfig.from_settings(settings),
        start_date=date.today() + timedelta(days=7),
    )
    units = normalize_units(_build_demo_scenes())

    async with session_factory() as session:
        latest = await schedule_repo.get_latest_schedule(session, DEMO_PROJECT_ID)
        stored_fingerprint = latest.content_fingerprint if latest else None
        outcome = plan_schedule(units, config, stored_fingerprint=stored_fingerprint)
        if outcome.schedule is not None:
            await schedule_repo.store_schedule(
                session, DEMO_PROJECT_ID, ScheduleRead.from_schedule(outcome.schedule)
            )
            await session.commit()

    await engine.dispose()


def main() -> None:
    asyncio.run(seed())


if __name__ == "__main__":
    main()
