"""Booking model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time, UniqueConstraint
from sqlalchemy.orm import relationship
from tutagora.database import Base

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
BOOKING_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED)


class Booking(Base):
    """A lesson reserved by a student with a tutor."""
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("tutor_id", "lesson_date", "start_time", name="uq_bookings_tutor_slot"),
    )

    id = Column(Integer, primary_key=True)
    student_id = Column(String(36), ForeignKey("profiles.id"), index=True, nullable=False)
    tutor_id = Column(Integer, ForeignKey("tutors.id"), index=True, nullable=False)
    subject = Column(String, nullable=False)
    lesson_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    status = Column(String, default=STATUS_CONFIRMED)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    tutor = relationship("TutorDetail")
    student = relationship("Account")
