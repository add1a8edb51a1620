"""Tenant schemas."""
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class TenantCreate(CamelModel):
    """Schema for provisioning a tenant."""

    slug: str = Field(pattern=r"^[a-z0-9-]+$")
    name: str
    domain: Optional[str] = None
    plan: Optional[str] = "free"


class TenantUpdate(CamelModel):
    """Schema for updating a tenant."""

    name: Optional[str] = None
    domain: Optional[str] = None
    plan: Optional[str] = None
    is_active: Optional[bool] = None


class TenantInDB(CamelModel):
    """Schema for tenant from database."""

    id: str
    slug: str
    name: str
    domain: Optional[str] = None
    plan: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
