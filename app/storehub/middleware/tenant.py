from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from app.storehub.core.config import settings
from app.storehub.core.context import RequestContext, build_request_context
from app.storehub.core.errors import catalog_response
from app.storehub.core.security import TokenDecodeError, decode_token, extract_bearer_token, is_token_expired
from app.storehub.db import session as db_session
from app.storehub.repos.tenants import TenantRepository
from app.storehub.services.identifiers import (
    extract_sector_identifier,
    extract_tenant_identifier,
    is_public_endpoint,
    should_skip_tenant_resolution,
)
from app.storehub.services.pipeline import PipelineRunner, Reject
from app.storehub.services.tenancy import TenantResolver


def _verified_token_tenant(authorization: str | None) -> str | None:
    token = extract_bearer_token(authorization)
    if not token:
        return None
    try:
        token_data = decode_token(token)
    except TokenDecodeError:
        return None
    if is_token_expired(token_data):
        return None
    return token_data.tenant_id


class TenantResolutionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        context = build_request_context(request)
        request.state.context = context
        request.state.tenant_id = None
        request.state.user_id = None

        if should_skip_tenant_resolution(request.url.path):
            return await call_next(request)

        result = await run_in_threadpool(self._resolve, request, context)
        if isinstance(result, Reject):
            return catalog_response(request, result.error, details=result.details, message=result.message)

        request.state.context = result.context
        request.state.tenant_id = result.context.tenant_id
        return await call_next(request)

    def _resolve(self, request: Request, context: RequestContext):
        headers = request.headers
        query = request.query_params
        tenant_identifier = extract_tenant_identifier(
            headers,
            headers.get("host", ""),
            query,
            custom_domains=settings.CUSTOM_DOMAINS,
            token_tenant=lambda: _verified_token_tenant(headers.get("Authorization")),
        )
        sector_identifier = extract_sector_identifier(
            headers,
            query,
            request.url.path,
            sector_keywords=settings.SECTOR_PATH_KEYWORDS,
        )
        db = db_session.SessionLocal()
        try:
            resolver = TenantResolver(TenantRepository(db))
            stage = resolver.stage(
                tenant_identifier,
                sector_identifier,
                allow_anonymous=is_public_endpoint(request.url.path, settings.API_PREFIX),
            )
            return PipelineRunner(request.app.state.security_events).run(context, [stage])
        finally:
            db.close()
