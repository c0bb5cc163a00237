"""Credential and session model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String
from tutagora.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Identity(Base):
    """Sign-in credentials. Never exposed through row queries."""
    __tablename__ = "identities"

    id = Column(String(36), primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class AuthSession(Base):
    """An issued access token; live until revoked or expired."""
    __tablename__ = "auth_sessions"

    id = Column(String(36), primary_key=True)  # token jti
    identity_id = Column(String(36), ForeignKey("identities.id"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    revoked_at = Column(DateTime(timezone=True))
