"""Court registry."""
import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, NotFoundError
from app.models.court import Court
from app.schemas.court import CourtCreate, CourtUpdate

logger = logging.getLogger(__name__)


async def list_courts(db: AsyncSession, tenant_id: str) -> List[Court]:
    result = await db.execute(
        select(Court)
        .where(Court.tenant_id == tenant_id)
        .order_by(Court.created_at, Court.id)
    )
    return list(result.scalars().all())


async def get_court(db: AsyncSession, tenant_id: str, court_id: str) -> Court:
    """
    Look up a court within the tenant.

    Raises:
        NotFoundError: No such court for this tenant
    """
    result = await db.execute(
        select(Court).where(Court.tenant_id == tenant_id, Court.id == court_id)
    )
    court = result.scalar_one_or_none()
    if court is None:
        raise NotFoundError("Court not found", details=f"Court {court_id} does not exist")
    return court


async def create_court(db: AsyncSession, tenant_id: str, court: CourtCreate) -> Court:
    court_id = court.id or f"court-{uuid.uuid4().hex[:8]}"

    existing = await db.execute(select(Court.id).where(Court.id == court_id))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(f"Court with id {court_id} already exists")

    db_court = Court(
        id=court_id,
        tenant_id=tenant_id,
        **court.model_dump(exclude={"id"}),
    )
    db.add(db_court)
    await db.commit()
    await db.refresh(db_court)
    logger.info(f"Created court {court_id} for tenant {tenant_id}")
    return db_court


async def update_court(
    db: AsyncSession, tenant_id: str, court_id: str, court_update: CourtUpdate
) -> Court:
    court = await get_court(db, tenant_id, court_id)

    update_data = court_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(court, field, value)

    await db.commit()
    await db.refresh(court)
    return court


async def delete_court(db: AsyncSession, tenant_id: str, court_id: str) -> None:
    court = await get_court(db, tenant_id, court_id)
    await db.delete(court)
    await db.commit()
    logger.info(f"Deleted court {court_id} for tenant {tenant_id}")
