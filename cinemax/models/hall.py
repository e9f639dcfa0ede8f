import uuid
from sqlalchemy import Column, String, Boolean, Integer
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from cinemax.db.session import Base

class Hall(Base):
    __tablename__ = "halls"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    type = Column(String(50), nullable=False, default="standard") # 'imax', 'standard', etc.
    capacity = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True)

    # Relationships
    screenings = relationship("Screening", back_populates="hall")
