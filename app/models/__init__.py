"""Database models."""
from app.models.tenant import Tenant
from app.models.court import Court
from app.models.venue_settings import VenueSettings
from app.models.time_slot import TimeSlot
from app.models.reservation import Reservation
from app.models.clinic import Clinic

__all__ = ["Tenant", "Court", "VenueSettings", "TimeSlot", "Reservation", "Clinic"]
