from uuid import UUID
from typing import Optional
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cinemax.db.session import get_db
from cinemax.services.queries import hall_schedule
from cinemax.schemas.screening import HallScheduleResponse
from cinemax.utils.scheduling import utcnow

hall_schedule_router = APIRouter(prefix="/admin/halls", tags=["Admin - Hall Schedule"])


@hall_schedule_router.get("/{hall_id}/schedule", response_model=HallScheduleResponse)
def get_hall_schedule(
    hall_id: UUID,
    day: Optional[date] = Query(None, alias="date", description="Day to inspect (UTC, defaults to today)"),
    db: Session = Depends(get_db),
):
    """
    Show what occupies a hall on one day and the free slots left between
    opening and closing time. Use it to pick a start time before scheduling.
    """
    return hall_schedule(db, hall_id, day or utcnow().date())
