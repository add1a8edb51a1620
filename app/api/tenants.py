"""Tenant administration endpoints."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.tenant import require_api_key
from app.schemas.tenant import TenantCreate, TenantInDB, TenantUpdate
from app.services import tenant_service

router = APIRouter(prefix="/tenants", tags=["tenants"], dependencies=[Depends(require_api_key)])


@router.get("", response_model=List[TenantInDB])
async def list_tenants(db: AsyncSession = Depends(get_db)):
    """List all tenants, newest first."""
    return await tenant_service.list_tenants(db)


@router.get("/{tenant_id}", response_model=TenantInDB)
async def get_tenant(tenant_id: str, db: AsyncSession = Depends(get_db)):
    """Get a tenant by ID."""
    return await tenant_service.get_tenant(db, tenant_id)


@router.post("", response_model=TenantInDB, status_code=201)
async def provision_tenant(tenant: TenantCreate, db: AsyncSession = Depends(get_db)):
    """
    Provision a venue.

    Creates the tenant and its default settings in one transaction.
    """
    return await tenant_service.provision_tenant(db, tenant)


@router.patch("/{tenant_id}", response_model=TenantInDB)
async def update_tenant(
    tenant_id: str,
    tenant_update: TenantUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a tenant, e.g. to deactivate it."""
    return await tenant_service.update_tenant(db, tenant_id, tenant_update)


@router.delete("/{tenant_id}", status_code=204)
async def delete_tenant(tenant_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a tenant and all of its data."""
    await tenant_service.delete_tenant(db, tenant_id)
