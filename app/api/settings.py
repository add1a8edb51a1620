"""Venue settings endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.tenant import get_tenant_id
from app.schemas.settings import SettingsInDB, SettingsUpdate
from app.services import settings_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsInDB)
async def get_settings(
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Get the venue's settings."""
    return await settings_service.get_settings(db, tenant_id)


@router.put("", response_model=SettingsInDB)
async def update_settings(
    settings_update: SettingsUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the venue's settings.

    Changing ``operatingHours`` cleans up stored slots that no longer match
    the schedule; booked and clinic slots are kept.

    Args:
        settings_update: Fields to replace
        tenant_id: Resolved tenant
        db: Database session

    Returns:
        Updated settings
    """
    return await settings_service.update_settings(db, tenant_id, settings_update)
