"""Availability model definitions."""

from sqlalchemy import Column, ForeignKey, Integer, SmallInteger, Time
from sqlalchemy.orm import relationship
from tutagora.database import Base


class AvailabilityWindow(Base):
    """Recurring weekly block of bookable time."""
    __tablename__ = "availability"

    id = Column(Integer, primary_key=True)
    tutor_id = Column(Integer, ForeignKey("tutors.id"), index=True, nullable=False)
    day_of_week = Column(SmallInteger, nullable=False)  # 0=Sunday, 6=Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    tutor = relationship("TutorDetail", back_populates="availability")
