from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.concurrency import run_in_threadpool

from app.storehub.api import api_router
from app.storehub.core.config import settings
from app.storehub.core.errors import setup_exception_handlers
from app.storehub.core.logging import configure_logging
from app.storehub.db import session as db_session
from app.storehub.middleware.observability import ObservabilityMiddleware
from app.storehub.middleware.rate_limit import RateLimitMiddleware
from app.storehub.middleware.tenant import TenantResolutionMiddleware
from app.storehub.middleware.trace import TraceIdMiddleware
from app.storehub.services.audit import AuditRecorder
from app.storehub.services.rate_limit import RateLimiter
from app.storehub.services.security_events import SecurityEventLog


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.storage_ready = await run_in_threadpool(db_session.check_database)
    yield


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.security_events = SecurityEventLog()
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.state.storage_ready = False
    app.state.audit_recorder = AuditRecorder(
        lambda: db_session.SessionLocal(),
        is_ready=lambda: app.state.storage_ready,
    )
    app.add_middleware(TenantResolutionMiddleware)
    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(TraceIdMiddleware)
    app.add_middleware(ObservabilityMiddleware)
    setup_exception_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
