"""Court model."""
from sqlalchemy import Column, String, ForeignKey, DateTime, Text, JSON
from sqlalchemy.sql import func
from app.core.database import Base


class Court(Base):
    """A bookable court at a venue."""

    __tablename__ = "courts"

    id = Column(String, primary_key=True)
    tenant_id = Column(String, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    amenities = Column(JSON, nullable=True, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
