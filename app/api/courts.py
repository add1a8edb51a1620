"""Court endpoints."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.tenant import get_tenant_id
from app.schemas.court import CourtCreate, CourtInDB, CourtUpdate
from app.services import court_service

router = APIRouter(prefix="/courts", tags=["courts"])


@router.get("", response_model=List[CourtInDB])
async def list_courts(
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """List the venue's courts."""
    return await court_service.list_courts(db, tenant_id)


@router.get("/{court_id}", response_model=CourtInDB)
async def get_court(
    court_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Get a court by ID."""
    return await court_service.get_court(db, tenant_id, court_id)


@router.post("", response_model=CourtInDB, status_code=201)
async def create_court(
    court: CourtCreate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Add a court to the venue."""
    return await court_service.create_court(db, tenant_id, court)


@router.put("/{court_id}", response_model=CourtInDB)
async def update_court(
    court_id: str,
    court_update: CourtUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Update a court's details."""
    return await court_service.update_court(db, tenant_id, court_id, court_update)


@router.delete("/{court_id}", status_code=204)
async def delete_court(
    court_id: str,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
):
    """Remove a court."""
    await court_service.delete_court(db, tenant_id, court_id)
