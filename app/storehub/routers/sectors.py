from fastapi import APIRouter, Depends

from app.storehub.core.context import RequestContext
from app.storehub.core.deps import optional_auth, require_auth
from app.storehub.core.routing import AuditedRoute
from app.storehub.db.session import get_db
from app.storehub.repos.stores import StoreRepository
from app.storehub.schemas.errors import COMMON_ERROR_RESPONSES
from app.storehub.schemas.tenants import CatalogResponse, SectorSummaryResponse
from app.storehub.services.audit import audit_access
from app.storehub.services.authorization import require_sector_access

router = APIRouter(route_class=AuditedRoute)


def _sector_summary(context: RequestContext, db) -> SectorSummaryResponse:
    tenant_id = context.tenant.id if context.tenant is not None else context.user.tenant_id
    stores = StoreRepository(db).list_by_tenant(tenant_id)
    return SectorSummaryResponse(
        tenant_id=str(tenant_id),
        sector_id=context.sector_id,
        stores=len(stores),
        trace_id=context.trace_id,
    )


@router.get("/pos/summary", response_model=SectorSummaryResponse, responses=COMMON_ERROR_RESPONSES)
@audit_access("pos")
def pos_summary(context: RequestContext = Depends(require_auth(require_sector_access())), db=Depends(get_db)):
    return _sector_summary(context, db)


@router.get("/warehouse/summary", response_model=SectorSummaryResponse, responses=COMMON_ERROR_RESPONSES)
@audit_access("warehouse")
def warehouse_summary(context: RequestContext = Depends(require_auth(require_sector_access())), db=Depends(get_db)):
    return _sector_summary(context, db)


@router.get("/catalog", response_model=CatalogResponse)
def catalog(context: RequestContext = Depends(optional_auth())):
    return CatalogResponse(
        personalized=context.is_authenticated,
        user_id=context.user_id,
        tenant_id=context.tenant_id,
        trace_id=context.trace_id,
    )
