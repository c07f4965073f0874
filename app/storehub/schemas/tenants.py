from datetime import datetime

from pydantic import BaseModel


class TenantItem(BaseModel):
    id: str
    name: str
    subdomain: str | None = None
    domain: str | None = None
    status: str
    is_active: bool
    subscription_end_date: datetime | None = None
    sectors: list[str]


class TenantListResponse(BaseModel):
    success: bool = True
    tenants: list[TenantItem]
    total: int
    trace_id: str


class TenantSettingsResponse(BaseModel):
    success: bool = True
    tenant: TenantItem
    trace_id: str


class SectorSummaryResponse(BaseModel):
    success: bool = True
    tenant_id: str
    sector_id: str
    stores: int
    trace_id: str


class CatalogResponse(BaseModel):
    success: bool = True
    personalized: bool
    user_id: str | None = None
    tenant_id: str | None = None
    trace_id: str
