from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from cinemax.core.config import SchedulingPolicy, settings
from cinemax.core.errors import NotFoundError
from cinemax.models.hall import Hall
from cinemax.models.screening import Screening
from cinemax.schemas.screening import (
    AvailableSlot,
    HallScheduleResponse,
    HallSummary,
    ScreeningFilter,
    ScreeningView,
)
from cinemax.utils.scheduling import available_slots, utcnow


def _base_query(db: Session):
    return db.query(Screening).options(
        joinedload(Screening.movie),
        joinedload(Screening.hall),
    )


def list_screenings(
    db: Session,
    filters: Optional[ScreeningFilter] = None,
    now: Optional[datetime] = None,
) -> List[ScreeningView]:
    """
    Read-only listing of screenings, earliest first.

    With ``upcoming_only`` (the default) only screenings starting at or after
    ``now`` are returned.
    """
    filters = filters or ScreeningFilter()
    query = _base_query(db)

    if filters.hall_id:
        query = query.filter(Screening.hall_id == filters.hall_id)
    if filters.movie_id:
        query = query.filter(Screening.movie_id == filters.movie_id)
    if filters.upcoming_only:
        query = query.filter(Screening.start_time >= (now or utcnow()))

    screenings = query.order_by(Screening.start_time.asc(), Screening.id.asc()).all()
    return [ScreeningView.model_validate(s) for s in screenings]


def get_screening(db: Session, screening_id: UUID) -> ScreeningView:
    screening = _base_query(db).filter(Screening.id == screening_id).first()
    if not screening:
        raise NotFoundError("Screening", screening_id)
    return ScreeningView.model_validate(screening)


def hall_schedule(
    db: Session,
    hall_id: UUID,
    day: date,
    policy: Optional[SchedulingPolicy] = None,
) -> HallScheduleResponse:
    """Everything occupying ``hall_id`` on ``day`` (UTC) plus the gaps left in its operating hours."""
    policy = policy or settings.scheduling_policy()

    hall = db.query(Hall).filter(Hall.id == hall_id, Hall.is_active == True).first()  # noqa: E712
    if not hall:
        raise NotFoundError("Hall", hall_id)

    day_start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    day_end = day_start + timedelta(days=1)

    # Anything overlapping the calendar day, including shows spilling over midnight
    screenings = (
        _base_query(db)
        .filter(
            Screening.hall_id == hall_id,
            Screening.start_time < day_end,
            Screening.end_time > day_start,
        )
        .order_by(Screening.start_time.asc())
        .all()
    )

    gaps = available_slots(
        day,
        [(s.start_time, s.end_time) for s in screenings],
        open_hour=policy.operating_hours_open,
        close_hour=policy.operating_hours_close,
    )

    return HallScheduleResponse(
        hall=HallSummary.model_validate(hall),
        date=day,
        screenings=[ScreeningView.model_validate(s) for s in screenings],
        available_slots=[AvailableSlot(**gap) for gap in gaps],
    )
