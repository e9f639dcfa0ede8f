from cinemax.schemas.common import SchedulingErrorResponse, ConflictingScreening
from cinemax.schemas.screening import (
    ScreeningCreate, ScreeningUpdate, ScreeningView, ScreeningFilter,
    ScreeningDeleteResponse, MovieSummary, HallSummary,
    AvailableSlot, HallScheduleResponse,
)
