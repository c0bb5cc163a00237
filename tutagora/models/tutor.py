"""Tutor detail model definitions."""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from tutagora.database import Base


class TutorDetail(Base):
    """Role-specific extension of an account with role=tutor."""
    __tablename__ = "tutors"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), unique=True, nullable=False)
    subject = Column(String)
    headline = Column(String)
    bio = Column(Text)
    hourly_rate = Column(Float, default=1000)
    currency = Column(String, default="KES")
    degree = Column(String)
    rating = Column(Float, default=0)
    reviews_count = Column(Integer, default=0)
    students_total = Column(Integer, default=0)
    lessons_completed = Column(Integer, default=0)
    verified = Column(Boolean, default=False, index=True)

    account = relationship("Account", back_populates="tutor")
    availability = relationship(
        "AvailabilityWindow",
        back_populates="tutor",
        order_by="AvailabilityWindow.id",
        cascade="all, delete-orphan",
    )
