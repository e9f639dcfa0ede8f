from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cinemax.db.session import get_db
from cinemax.services.queries import list_screenings, get_screening
from cinemax.schemas.screening import ScreeningFilter, ScreeningView

router = APIRouter(prefix="/screenings", tags=["Screenings"])


@router.get("/", response_model=List[ScreeningView])
def list_upcoming_screenings(
    hall_id: Optional[UUID] = None,
    movie_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
):
    return list_screenings(db, ScreeningFilter(hall_id=hall_id, movie_id=movie_id, upcoming_only=True))


@router.get("/{id}", response_model=ScreeningView)
def read_screening(id: UUID, db: Session = Depends(get_db)):
    return get_screening(db, id)
