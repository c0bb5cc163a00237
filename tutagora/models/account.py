"""Account (profile) model definitions."""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship
from tutagora.database import Base

ROLE_STUDENT = "student"
ROLE_TUTOR = "tutor"
ROLES = (ROLE_STUDENT, ROLE_TUTOR)


class Account(Base):
    """Public profile of a signed-up user."""
    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("identities.id"), primary_key=True)
    email = Column(String, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    role = Column(String, nullable=False)  # student/tutor
    avatar_url = Column(String)

    tutor = relationship("TutorDetail", back_populates="account", uselist=False)
