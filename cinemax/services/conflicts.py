"""Detect hall double-booking between a candidate screening and persisted ones."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from cinemax.models.screening import Screening


def find_conflicting_screening(
    db: Session,
    hall_id: UUID,
    start_time: datetime,
    end_time: datetime,
    exclude_screening_id: Optional[UUID] = None,
) -> Optional[Screening]:
    """
    Return the earliest screening in ``hall_id`` overlapping ``[start_time, end_time)``.

    Overlap rule: existing.start_time < end_time AND existing.end_time > start_time,
    so screenings that merely touch the candidate are not conflicts.
    Must run in the caller's transaction while the hall lock is held.
    """
    filters = [
        Screening.hall_id == hall_id,
        Screening.start_time < end_time,
        Screening.end_time > start_time,
    ]
    if exclude_screening_id:
        filters.append(Screening.id != exclude_screening_id)

    return (
        db.query(Screening)
        .options(joinedload(Screening.movie))
        .filter(*filters)
        .order_by(Screening.start_time.asc(), Screening.id.asc())
        .first()
    )
