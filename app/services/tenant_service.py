"""Tenant provisioning and resolution."""
import logging
from typing import List

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ConflictError, NotFoundError, TenantInactiveError
from app.models import Clinic, Court, Reservation, Tenant, TimeSlot, VenueSettings
from app.schemas.tenant import TenantCreate, TenantUpdate
from app.services import settings_service

logger = logging.getLogger(__name__)


async def provision_tenant(db: AsyncSession, data: TenantCreate) -> Tenant:
    """
    Create a tenant together with its default settings.

    The slug doubles as the tenant ID.
    """
    result = await db.execute(select(Tenant).where(Tenant.slug == data.slug))
    if result.scalar_one_or_none() is not None:
        raise ConflictError(f"Tenant with slug '{data.slug}' already exists")

    tenant = Tenant(id=data.slug, **data.model_dump())
    db.add(tenant)
    await db.flush()
    await settings_service.ensure_settings(
        db, tenant.id, timezone=settings.DEFAULT_TIMEZONE, court_name=data.name
    )
    await db.commit()
    await db.refresh(tenant)
    logger.info(f"Provisioned tenant {tenant.id}")
    return tenant


async def list_tenants(db: AsyncSession) -> List[Tenant]:
    result = await db.execute(select(Tenant).order_by(Tenant.created_at.desc()))
    return list(result.scalars().all())


async def get_tenant(db: AsyncSession, tenant_id: str) -> Tenant:
    result = await db.execute(select(Tenant).where(Tenant.id == tenant_id))
    tenant = result.scalar_one_or_none()
    if tenant is None:
        raise NotFoundError("Tenant not found")
    return tenant


async def update_tenant(db: AsyncSession, tenant_id: str, tenant_update: TenantUpdate) -> Tenant:
    tenant = await get_tenant(db, tenant_id)

    update_data = tenant_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(tenant, field, value)

    await db.commit()
    await db.refresh(tenant)
    return tenant


async def delete_tenant(db: AsyncSession, tenant_id: str) -> None:
    """Delete a tenant and every row scoped to it."""
    tenant = await get_tenant(db, tenant_id)
    for model in (Reservation, Clinic, TimeSlot, Court, VenueSettings):
        await db.execute(delete(model).where(model.tenant_id == tenant_id))
    await db.delete(tenant)
    await db.commit()
    logger.info(f"Deleted tenant {tenant_id} and all of its data")


async def resolve_tenant(db: AsyncSession, slug: str) -> str:
    """
    Map a slug or ID to an active tenant ID.

    Raises:
        NotFoundError: Unknown tenant
        TenantInactiveError: Tenant is deactivated
    """
    result = await db.execute(
        select(Tenant).where(or_(Tenant.slug == slug, Tenant.id == slug))
    )
    tenant = result.scalars().first()
    if tenant is None:
        raise NotFoundError(f"Tenant not found: {slug}")
    if not tenant.is_active:
        raise TenantInactiveError()
    return tenant.id
