from fastapi import Depends
from sqlalchemy.orm import Session

from cinemax.db.session import get_db
from cinemax.services.scheduler import ScreeningScheduler


def get_scheduler(db: Session = Depends(get_db)) -> ScreeningScheduler:
    return ScreeningScheduler(db)
