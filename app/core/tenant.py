"""Tenant resolution for tenant-scoped routes."""
from typing import Optional

from fastapi import Depends, Header, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.services import tenant_service


def tenant_slug_from_request(
    request: Request,
    header_tenant: Optional[str] = None,
    query_tenant: Optional[str] = None,
) -> str:
    """
    Pick the tenant slug for a request.

    Order: ``X-Tenant-ID`` header, ``?tenant=`` query, Host subdomain
    (``citypark.example.com`` -> ``citypark``), then the configured default.
    """
    if header_tenant:
        return header_tenant
    if query_tenant:
        return query_tenant
    host = request.headers.get("host", "").split(":")[0]
    parts = host.split(".")
    if len(parts) >= 3:
        return parts[0]
    return settings.DEFAULT_TENANT


async def get_tenant_id(
    request: Request,
    x_tenant_id: Optional[str] = Header(default=None),
    tenant: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> str:
    """FastAPI dependency resolving the active tenant ID for the request."""
    slug = tenant_slug_from_request(request, x_tenant_id, tenant)
    return await tenant_service.resolve_tenant(db, slug)


def require_api_key(x_api_key: Optional[str] = Header(default=None)) -> None:
    """Guard for tenant administration routes."""
    if not settings.SUPER_ADMIN_API_KEY:
        raise HTTPException(status_code=503, detail="Tenant management is not configured")
    if x_api_key != settings.SUPER_ADMIN_API_KEY:
        raise HTTPException(status_code=401, detail="Invalid API key")
