import uuid

from fastapi import APIRouter, Depends

from app.storehub.core.context import RequestContext
from app.storehub.core.deps import require_auth
from app.storehub.core.error_catalog import AppError, ErrorCatalog
from app.storehub.core.routing import AuditedRoute
from app.storehub.db.models import Store
from app.storehub.db.session import get_db
from app.storehub.repos.stores import StoreRepository
from app.storehub.schemas.errors import COMMON_ERROR_RESPONSES
from app.storehub.schemas.stores import StoreCreateRequest, StoreItem, StoreListResponse, StoreResponse
from app.storehub.services.audit import audit_create, audit_read
from app.storehub.services.authorization import MANAGER, ROLE_LEVELS, require_permission, require_role

router = APIRouter(route_class=AuditedRoute)


def _store_item(store: Store) -> StoreItem:
    return StoreItem(
        id=str(store.id),
        tenant_id=str(store.tenant_id),
        name=store.name,
        created_at=store.created_at,
    )


def _tenant_scope(context: RequestContext):
    return context.tenant.id if context.tenant is not None else context.user.tenant_id


@router.get("/stores", response_model=StoreListResponse, responses=COMMON_ERROR_RESPONSES)
def list_stores(
    context: RequestContext = Depends(require_auth(require_permission("stores", "read"))),
    db=Depends(get_db),
):
    stores = StoreRepository(db).list_by_tenant(_tenant_scope(context))
    return StoreListResponse(
        stores=[_store_item(store) for store in stores],
        total=len(stores),
        trace_id=context.trace_id,
    )


@router.post("/stores", response_model=StoreResponse, status_code=201, responses=COMMON_ERROR_RESPONSES)
@audit_create("store")
def create_store(
    payload: StoreCreateRequest,
    context: RequestContext = Depends(
        require_auth(require_role(ROLE_LEVELS[MANAGER]), require_permission("stores", "write"))
    ),
    db=Depends(get_db),
):
    store = StoreRepository(db).create(Store(tenant_id=_tenant_scope(context), name=payload.name))
    return StoreResponse(store=_store_item(store), trace_id=context.trace_id)


@router.get("/stores/{store_id}", response_model=StoreResponse, responses=COMMON_ERROR_RESPONSES)
@audit_read("store", resource_id=lambda request: request.path_params.get("store_id"))
def get_store(
    store_id: uuid.UUID,
    context: RequestContext = Depends(require_auth(require_permission("stores", "read"))),
    db=Depends(get_db),
):
    store = StoreRepository(db).get_by_id_in_tenant(store_id, _tenant_scope(context))
    if store is None:
        raise AppError(ErrorCatalog.NOT_FOUND, message="Store not found")
    return StoreResponse(store=_store_item(store), trace_id=context.trace_id)

