from typing import Optional, List
from pydantic import BaseModel, UUID4, Field
from decimal import Decimal
from datetime import date, datetime


# Screening: Create (admin POST /admin/screenings)
class ScreeningCreate(BaseModel):
    movie_id: Optional[UUID4] = None
    hall_id: Optional[UUID4] = None
    start_time: Optional[datetime] = None
    base_price: Optional[Decimal] = None


# Screening: Update (admin PATCH /admin/screenings/{id}); hall and movie are fixed
class ScreeningUpdate(BaseModel):
    start_time: datetime
    base_price: Decimal


# Compact movie for nested screening responses
class MovieSummary(BaseModel):
    id: UUID4
    title: str
    duration_minutes: int

    class Config:
        from_attributes = True


# Compact hall for nested screening responses
class HallSummary(BaseModel):
    id: UUID4
    name: str
    type: Optional[str] = None

    class Config:
        from_attributes = True


# Screening: fully materialised response
class ScreeningView(BaseModel):
    id: UUID4
    start_time: datetime
    end_time: datetime
    base_price: Decimal
    movie: MovieSummary
    hall: HallSummary

    class Config:
        from_attributes = True


# Query filter for GET /admin/screenings and the library facade
class ScreeningFilter(BaseModel):
    hall_id: Optional[UUID4] = None
    movie_id: Optional[UUID4] = None
    upcoming_only: bool = True


# Free gap in a hall's operating day
class AvailableSlot(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_minutes: int


# Response for GET /admin/halls/{id}/schedule
class HallScheduleResponse(BaseModel):
    hall: HallSummary
    date: date
    screenings: List[ScreeningView] = []
    available_slots: List[AvailableSlot] = []


class ScreeningDeleteResponse(BaseModel):
    id: UUID4
    deleted: bool = True
