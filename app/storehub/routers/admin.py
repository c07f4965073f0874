from fastapi import APIRouter, Depends, Query

from app.storehub.core.context import RequestContext
from app.storehub.core.deps import require_auth
from app.storehub.core.routing import AuditedRoute
from app.storehub.db.models import Tenant
from app.storehub.db.session import get_db
from app.storehub.repos.tenants import TenantRepository
from app.storehub.schemas.errors import COMMON_ERROR_RESPONSES
from app.storehub.schemas.tenants import TenantItem, TenantListResponse, TenantSettingsResponse
from app.storehub.services.audit import audit_read
from app.storehub.services.authorization import require_2fa, require_super_admin, require_tenant_owner

router = APIRouter(route_class=AuditedRoute)


def _tenant_item(tenant: Tenant) -> TenantItem:
    return TenantItem(
        id=str(tenant.id),
        name=tenant.name,
        subdomain=tenant.subdomain,
        domain=tenant.domain,
        status=tenant.status,
        is_active=tenant.is_active,
        subscription_end_date=tenant.subscription_end_date,
        sectors=sorted(link.sector.code for link in tenant.tenant_sectors if link.is_active),
    )


@router.get("/admin/tenants", response_model=TenantListResponse, responses=COMMON_ERROR_RESPONSES)
@audit_read("tenant")
def list_tenants(
    status: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    context: RequestContext = Depends(require_auth(require_super_admin())),
    db=Depends(get_db),
):
    tenants, total = TenantRepository(db).list_all(status=status, limit=limit, offset=offset)
    return TenantListResponse(
        tenants=[_tenant_item(tenant) for tenant in tenants],
        total=total,
        trace_id=context.trace_id,
    )


@router.get("/tenant/settings", response_model=TenantSettingsResponse, responses=COMMON_ERROR_RESPONSES)
def tenant_settings(context: RequestContext = Depends(require_auth(require_tenant_owner(), require_2fa()))):
    tenant = context.tenant if context.tenant is not None else context.user.tenant
    return TenantSettingsResponse(tenant=_tenant_item(tenant), trace_id=context.trace_id)
