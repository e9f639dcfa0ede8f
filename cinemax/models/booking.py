import uuid
import enum
from sqlalchemy import Column, DateTime, func, ForeignKey, Enum as SAEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from cinemax.db.session import Base

class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

# Bookings in these states block deleting their screening
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    screening_id = Column(UUID(as_uuid=True), ForeignKey("screenings.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(SAEnum(BookingStatus, native_enum=False), nullable=False, default=BookingStatus.CONFIRMED, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    screening = relationship("Screening", back_populates="bookings")
