"""Reservation model."""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Numeric, JSON, Index
from sqlalchemy.sql import func
from app.core.database import Base


class Reservation(Base):
    """A booking of one time slot, optionally an open-play game others can join."""

    __tablename__ = "reservations"

    id = Column(String, primary_key=True)
    tenant_id = Column(String, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    # Correlates with TimeSlot.id; no foreign key, the slot row may be virtual.
    time_slot_id = Column(String, nullable=False, index=True)
    court_id = Column(String, nullable=False, index=True)
    player_name = Column(String, nullable=False)
    player_email = Column(String, nullable=False, index=True)
    player_phone = Column(String, nullable=False)
    players = Column(Integer, default=1, nullable=False)
    participants = Column(JSON, nullable=True, default=list)
    is_open_play = Column(Boolean, default=False, nullable=False)
    open_play_slots = Column(Integer, nullable=True)
    max_open_players = Column(Integer, nullable=True)
    open_play_group_id = Column(String, nullable=True, index=True)
    payment_status = Column(String, nullable=True)
    amount_paid = Column(Numeric(10, 2), nullable=True)
    comments = Column(JSON, nullable=True, default=list)
    created_by_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        Index("ix_reservations_tenant_slot", "tenant_id", "time_slot_id"),
    )
