"""Clinic endpoints."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.tenant import get_tenant_id
from app.schemas.clinic import ClinicCreate, ClinicInDB, ClinicUpdate
from app.services import clinic_service

router = APIRouter(prefix="/clinics", tags=["clinics"])


@router.get("", response_model=List[ClinicInDB])
async def list_clinics(
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """List the venue's clinics."""
    return await clinic_service.list_clinics(db, tenant_id)


@router.get("/{clinic_id}", response_model=ClinicInDB)
async def get_clinic(
    clinic_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a clinic by ID."""
    return await clinic_service.get_clinic(db, tenant_id, clinic_id)


@router.post("", response_model=ClinicInDB, status_code=201)
async def create_clinic(
    clinic: ClinicCreate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a clinic.

    With ``timeSlotId`` the slot is taken over by the clinic and no longer
    bookable.
    """
    return await clinic_service.create_clinic(db, tenant_id, clinic)


@router.put("/{clinic_id}", response_model=ClinicInDB)
async def update_clinic(
    clinic_id: str,
    clinic_update: ClinicUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Update a clinic."""
    return await clinic_service.update_clinic(db, tenant_id, clinic_id, clinic_update)


@router.delete("/{clinic_id}", status_code=204)
async def delete_clinic(
    clinic_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Delete a clinic and release its slot."""
    await clinic_service.delete_clinic(db, tenant_id, clinic_id)
