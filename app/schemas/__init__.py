"""API schemas."""
from app.schemas.settings import (
    DaySetting,
    SettingsUpdate,
    SettingsInDB,
)
from app.schemas.court import (
    CourtCreate,
    CourtUpdate,
    CourtInDB,
)
from app.schemas.reservation import (
    Participant,
    ReservationCreate,
    ReservationUpdate,
    ReservationInDB,
)
from app.schemas.clinic import (
    ClinicCreate,
    ClinicUpdate,
    ClinicInDB,
)
from app.schemas.time_slot import (
    TimeSlotUpsert,
    TimeSlotUpdate,
    TimeSlotInDB,
    SlotView,
)
from app.schemas.tenant import (
    TenantCreate,
    TenantUpdate,
    TenantInDB,
)

__all__ = [
    "DaySetting",
    "SettingsUpdate",
    "SettingsInDB",
    "CourtCreate",
    "CourtUpdate",
    "CourtInDB",
    "Participant",
    "ReservationCreate",
    "ReservationUpdate",
    "ReservationInDB",
    "ClinicCreate",
    "ClinicUpdate",
    "ClinicInDB",
    "TimeSlotUpsert",
    "TimeSlotUpdate",
    "TimeSlotInDB",
    "SlotView",
    "TenantCreate",
    "TenantUpdate",
    "TenantInDB",
]
