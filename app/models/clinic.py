"""Clinic model."""
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Numeric, Text, JSON
from sqlalchemy.sql import func
from app.core.database import Base


class Clinic(Base):
    """A coached session that takes over a time slot."""

    __tablename__ = "clinics"

    id = Column(String, primary_key=True)
    tenant_id = Column(String, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    coach_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    time_slot_id = Column(String, nullable=True)
    max_participants = Column(Integer, default=8, nullable=False)
    participants = Column(JSON, nullable=True, default=list)
    price = Column(Numeric(10, 2), default=0, nullable=False)
    level = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
