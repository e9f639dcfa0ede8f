import uuid
import enum
from sqlalchemy import Column, String, DateTime, func, Integer, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from cinemax.db.session import Base

class MovieStatus(str, enum.Enum):
    NOW_SHOWING = "now_showing"
    COMING_SOON = "coming_soon"
    ARCHIVED = "archived"

# Only these may be placed on the schedule
SCHEDULABLE_STATUSES = frozenset({MovieStatus.NOW_SHOWING})

class Movie(Base):
    __tablename__ = "movies"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    status = Column(SAEnum(MovieStatus, native_enum=False), nullable=False, default=MovieStatus.COMING_SOON, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    screenings = relationship("Screening", back_populates="movie")

    @property
    def is_schedulable(self) -> bool:
        return self.status in SCHEDULABLE_STATUSES
