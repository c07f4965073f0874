from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from app.storehub.core.error_catalog import ErrorCatalog
from app.storehub.core.errors import error_response
from app.storehub.db import session as db_session

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    return {"status": "ok", "trace_id": trace_id}


@router.get("/ready")
async def ready(request: Request):
    trace_id = getattr(request.state, "trace_id", "")
    if not await run_in_threadpool(db_session.check_database):
        return error_response(
            code=ErrorCatalog.DB_UNAVAILABLE.code,
            message=ErrorCatalog.DB_UNAVAILABLE.message,
            details=None,
            trace_id=trace_id,
            status_code=ErrorCatalog.DB_UNAVAILABLE.status_code,
        )
    return {"status": "ready", "trace_id": trace_id}
