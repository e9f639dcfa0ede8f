from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cinemax.db.session import get_db
from cinemax.api.deps import get_scheduler
from cinemax.services.queries import list_screenings as query_screenings
from cinemax.services.scheduler import ScreeningScheduler
from cinemax.schemas.common import SchedulingErrorResponse
from cinemax.schemas.screening import (
    ScreeningCreate,
    ScreeningUpdate,
    ScreeningView,
    ScreeningFilter,
    ScreeningDeleteResponse,
)

router = APIRouter(prefix="/admin/screenings", tags=["Admin - Screenings"])

_error_responses = {
    404: {"model": SchedulingErrorResponse},
    409: {"model": SchedulingErrorResponse},
    422: {"model": SchedulingErrorResponse},
    503: {"model": SchedulingErrorResponse},
}


@router.post(
    "/",
    response_model=ScreeningView,
    status_code=status.HTTP_201_CREATED,
    responses=_error_responses,
)
def create_screening(
    data: ScreeningCreate,
    scheduler: ScreeningScheduler = Depends(get_scheduler),
):
    """
    Schedule a movie in a hall.

    The end time is derived from the movie's runtime plus the cleaning buffer.
    Rejected with 409 if the hall is occupied at any point of that window.
    """
    return scheduler.create_screening(
        movie_id=data.movie_id,
        hall_id=data.hall_id,
        start_time=data.start_time,
        base_price=data.base_price,
    )


@router.get("/", response_model=List[ScreeningView])
def list_screenings(
    hall_id: Optional[UUID] = None,
    movie_id: Optional[UUID] = None,
    upcoming_only: bool = Query(True, description="Only screenings that have not started yet"),
    db: Session = Depends(get_db),
):
    return query_screenings(
        db,
        ScreeningFilter(hall_id=hall_id, movie_id=movie_id, upcoming_only=upcoming_only),
    )


@router.patch("/{id}", response_model=ScreeningView, responses=_error_responses)
def update_screening(
    id: UUID,
    data: ScreeningUpdate,
    scheduler: ScreeningScheduler = Depends(get_scheduler),
):
    """Move a screening to a new start time and/or change its price. Hall and movie stay fixed."""
    return scheduler.update_screening(id, start_time=data.start_time, base_price=data.base_price)


@router.delete("/{id}", response_model=ScreeningDeleteResponse, responses=_error_responses)
def delete_screening(
    id: UUID,
    scheduler: ScreeningScheduler = Depends(get_scheduler),
):
    scheduler.delete_screening(id)
    return ScreeningDeleteResponse(id=id)
