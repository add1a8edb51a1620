"""Persisted time slot override model."""
from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, Date, JSON, Index
from sqlalchemy.sql import func
from app.core.database import Base


class TimeSlot(Base):
    """
    Sparse override of a generated slot.

    A row only exists once something distinguishes the slot from what the
    generator would produce: a booking, a block, a clinic or comments. The
    ID is derived from (court, date, start time), see app.services.slot_ids.
    """

    __tablename__ = "time_slots"

    tenant_id = Column(String, ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True)
    id = Column(String, primary_key=True)
    court_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)    # HH:MM
    available = Column(Boolean, default=True, nullable=False)
    blocked = Column(Boolean, default=False, nullable=False)
    type = Column(String, nullable=True)  # None or "clinic"
    clinic_id = Column(String, nullable=True)
    # Set while a reservation holds the slot; the sweep only releases these
    held_by_booking = Column(Boolean, default=False, nullable=False)
    comments = Column(JSON, nullable=True, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index("ix_time_slots_tenant_date", "tenant_id", "date"),
    )
