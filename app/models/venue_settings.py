"""Venue settings model."""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, JSON
from sqlalchemy.sql import func
from app.core.database import Base


class VenueSettings(Base):
    """Per-tenant configuration. Exactly one row per tenant."""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String, ForeignKey("tenants.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    court_name = Column(String, nullable=True)
    # [{"dayOfWeek": "monday", "isOpen": true, "startTime": "08:00", "endTime": "20:00",
    #   "slotDurationMinutes": 60, "breakMinutes": 15}, ...]
    operating_hours = Column(JSON, nullable=False, default=list)
    advance_booking_limit_hours = Column(Integer, default=24, nullable=False)
    cancellation_deadline_hours = Column(Integer, default=2, nullable=False)
    min_players_per_slot = Column(Integer, default=1, nullable=False)
    max_players_per_slot = Column(Integer, default=4, nullable=False)
    allow_walk_ins = Column(Boolean, default=True, nullable=False)
    require_payment = Column(Boolean, default=False, nullable=False)
    visibility_period = Column(String, default="4_weeks", nullable=False)
    timezone = Column(String, default="UTC", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
