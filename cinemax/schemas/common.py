from typing import Optional
from pydantic import BaseModel


# Error responses: rendered from cinemax.core.errors.SchedulingError
class ConflictingScreening(BaseModel):
    title: str
    end_time: str


class SchedulingErrorResponse(BaseModel):
    reason_code: str
    message: str
    errors: Optional[dict[str, str]] = None
    conflicting_screening: Optional[ConflictingScreening] = None
    active_bookings: Optional[int] = None
