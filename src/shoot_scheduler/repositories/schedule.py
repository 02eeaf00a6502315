from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shoot_scheduler.db.models.schedule import ShootSchedule
from shoot_scheduler.schemas.schedule import ScheduleRead


async def get_latest_schedule(session: AsyncSession, project_id: str) -> ShootSchedule | None:
    result = await session.execute(
        select(ShootSchedule)
        .where(ShootSchedule.project_id == project_id)
        .order_by(ShootSchedule.created_at.desc(), ShootSchedule.id.desc())
    )
    return result.scalars().first()


async def list_schedules(session: AsyncSession, project_id: str) -> list[ShootSchedule]:
    result = await session.execute(
        select(ShootSchedule)
        .where(ShootSchedule.project_id == project_id)
        .order_by(ShootSchedule.created_at.desc(), ShootSchedule.id.desc())
    )
    return list(result.scalars().all())


async def store_schedule(
    session: AsyncSession,
    project_id: str,
    schedule: ScheduleRead,
) -> ShootSchedule:
    count_result = await session.execute(
        select(func.count(ShootSchedule.id)).where(ShootSchedule.project_id == project_id)
    )
    existing_count = count_result.scalar_one()

    record = ShootSchedule(
        project_id=project_id,
        version_label=f"v{existing_count + 1}",
        content_fingerprint=schedule.content_fingerprint,
        total_days=schedule.total_days,
        total_scenes=schedule.total_scenes,
        total_duration_minutes=schedule.total_duration_minutes,
        optimization_score=schedule.optimization_score,
        payload=schedule.model_dump(mode="json"),
    )
    session.add(record)
    await session.flush()
    await session.refresh(record)
    return record


async def delete_schedules(session: AsyncSession, project_id: str) -> int:
    result = await session.execute(delete(ShootSchedule).where(ShootSchedule.project_id == project_id))
    return result.rowcount or 0


def schedule_from_record(record: ShootSchedule) -> ScheduleRead:
    return ScheduleRead.model_validate(record.payload)
