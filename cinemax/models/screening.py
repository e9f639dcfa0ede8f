import uuid
from sqlalchemy import Column, DateTime, func, DECIMAL, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from cinemax.db.session import Base
from cinemax.db.types import UTCDateTime

class Screening(Base):
    __tablename__ = "screenings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    movie_id = Column(UUID(as_uuid=True), ForeignKey("movies.id"), nullable=False, index=True)
    hall_id = Column(UUID(as_uuid=True), ForeignKey("halls.id"), nullable=False, index=True)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False) # start + duration + buffer, never set directly
    base_price = Column(DECIMAL(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    movie = relationship("Movie", back_populates="screenings")
    hall = relationship("Hall", back_populates="screenings")
    bookings = relationship("Booking", back_populates="screening", passive_deletes=True)

    __table_args__ = (
        Index("ix_screenings_hall_window", "hall_id", "start_time", "end_time"),
    )

    def __repr__(self):
        return f"<Screening(id={self.id}, hall_id={self.hall_id}, start={self.start_time}, end={self.end_time})>"
