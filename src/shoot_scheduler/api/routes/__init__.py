from fastapi import APIRouter

from . import schedules

api_router = APIRouter()

api_router.include_router(schedules.router, prefix="/projects", tags=["schedules"])
