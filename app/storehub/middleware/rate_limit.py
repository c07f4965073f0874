import math

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.storehub.core.context import build_request_context
from app.storehub.core.error_catalog import ErrorCatalog
from app.storehub.core.errors import catalog_response
from app.storehub.core.metrics import metrics
from app.storehub.services.identifiers import should_skip_tenant_resolution
from app.storehub.services.pipeline import event_details


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if should_skip_tenant_resolution(request.url.path):
            return await call_next(request)

        limiter = request.app.state.rate_limiter
        client = request.client
        decision = limiter.hit(client.host if client else "unknown")
        if decision.allowed:
            return await call_next(request)

        metrics.increment_rate_limited()
        request.app.state.security_events.record(
            "rate_limit_exceeded",
            event_details(build_request_context(request), count=decision.count),
            "medium",
        )
        response = catalog_response(request, ErrorCatalog.RATE_LIMIT_EXCEEDED)
        response.headers["Retry-After"] = str(math.ceil(decision.retry_after))
        return response
