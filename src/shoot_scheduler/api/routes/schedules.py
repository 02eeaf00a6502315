import asyncio
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shoot_scheduler.core.config import get_settings
from shoot_scheduler.core.errors import ConfigurationError
from shoot_scheduler.db.session import get_db_session
from shoot_scheduler.repositories import schedule as schedule_repo
from shoot_scheduler.schemas.schedule import (
    GroupingRequest,
    GroupRead,
    ScheduleGenerationRequest,
    ScheduleGenerationResponse,
    ScheduleRead,
    ScheduleVersionRead,
    SchedulingConfigIn,
)
from shoot_scheduler.services.export import breakdown_to_csv, schedule_to_csv
from shoot_scheduler.services.grouping import group_by
from shoot_scheduler.services.planner import plan_schedule
from shoot_scheduler.services.scheduler import SchedulingConfig
from shoot_scheduler.services.units import normalize_units

router = APIRouter()

# One recomputation per project at a time so the stored fingerprint and
# schedule are always written together. Entries live while a request holds
# or waits on them.
_project_locks: dict[str, asyncio.Lock] = {}
_lock_users: Counter[str] = Counter()


@asynccontextmanager
async def project_lock(project_id: str) -> AsyncIterator[None]:
    lock = _project_locks.setdefault(project_id, asyncio.Lock())
    _lock_users[project_id] += 1
    try:
        async with lock:
            yield
    finally:
        _lock_users[project_id] -= 1
        if not _lock_users[project_id]:
            del _lock_users[project_id]
            del _project_locks[project_id]


@router.post("/{project_id}/schedules/generate", response_model=ScheduleGenerationResponse)
async def generate_schedule(
    project_id: str,
    payload: ScheduleGenerationRequest,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ScheduleGenerationResponse:
    defaults = SchedulingConfig.from_settings(get_settings())
    try:
        config = (payload.config or SchedulingConfigIn()).merge(defaults)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    units = normalize_units([scene.to_record() for scene in payload.scenes])

    async with project_lock(project_id):
        latest = await schedule_repo.get_latest_schedule(session, project_id)
        stored_fingerprint = None
        if latest is not None and not payload.force:
            stored_fingerprint = latest.content_fingerprint
        outcome = plan_schedule(units, config, stored_fingerprint=stored_fingerprint)

        if not outcome.recomputed and latest is not None:
            return ScheduleGenerationResponse(
                project_id=project_id,
                version_label=latest.version_label,
                reused=True,
                schedule=schedule_repo.schedule_from_record(latest),
            )

        schedule = ScheduleRead.from_schedule(outcome.schedule)
        record = await schedule_repo.store_schedule(session, project_id, schedule)
        await session.commit()

    return ScheduleGenerationResponse(
        project_id=project_id,
        version_label=record.version_label,
        reused=False,
        schedule=schedule,
    )


@router.get("/{project_id}/schedules/latest", response_model=ScheduleRead)
async def get_latest_schedule(
    project_id: str, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> ScheduleRead:
    record = await schedule_repo.get_latest_schedule(session, project_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    return schedule_repo.schedule_from_record(record)


@router.get("/{project_id}/schedules/latest/export")
async def export_latest_schedule(
    project_id: str,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    kind: Literal["schedule", "breakdown"] = "schedule",
) -> PlainTextResponse:
    record = await schedule_repo.get_latest_schedule(session, project_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    schedule = schedule_repo.schedule_from_record(record)
    if kind == "breakdown":
        content = breakdown_to_csv(schedule.breakdown_index)
    else:
        content = schedule_to_csv(schedule)
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{project_id}-{kind}.csv"'},
    )


@router.get("/{project_id}/schedules", response_model=list[ScheduleVersionRead])
async def list_schedules(
    project_id: str, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> list[ScheduleVersionRead]:
    records = await schedule_repo.list_schedules(session, project_id)
    return [ScheduleVersionRead.model_validate(record) for record in records]


@router.delete("/{project_id}/schedules", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedules(
    project_id: str, session: Annotated[AsyncSession, Depends(get_db_session)]
) -> None:
    removed = await schedule_repo.delete_schedules(session, project_id)
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Schedule not found")
    await session.commit()


@router.post("/{project_id}/scenes/groups", response_model=list[GroupRead])
async def group_scenes(project_id: str, payload: GroupingRequest) -> list[GroupRead]:
    cast_policy = payload.cast_policy or get_settings().cast_key_policy
    units = normalize_units([scene.to_record() for scene in payload.scenes])
    groups = group_by(units, payload.relationship, cast_policy=cast_policy)
    return [GroupRead(key=group.key, member_ids=group.member_ids) for group in groups.values()]
