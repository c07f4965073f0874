from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from app.storehub.core.context import RequestContext, get_request_context
from app.storehub.core.deps import require_auth
from app.storehub.core.routing import AuditedRoute
from app.storehub.db.session import get_db
from app.storehub.schemas.auth import IdentityResponse, LoginRequest, LogoutResponse, TokenResponse
from app.storehub.schemas.errors import COMMON_ERROR_RESPONSES
from app.storehub.services.audit import audit_login, audit_logout
from app.storehub.services.auth import AuthService

router = APIRouter(route_class=AuditedRoute)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Open a session and return a bearer token. Tenant scoping applies when a tenant identifier is sent.",
    responses=COMMON_ERROR_RESPONSES,
)
@audit_login()
async def login(request: Request, payload: LoginRequest, db=Depends(get_db)):
    context = get_request_context(request)
    service = AuthService(db)
    _user, session, token = await run_in_threadpool(
        service.login,
        payload.email or payload.username_or_email,
        payload.password,
        tenant_id=context.tenant.id if context.tenant is not None else None,
        ip_address=context.client_ip,
        user_agent=context.user_agent,
    )
    return TokenResponse(
        access_token=token,
        expires_at=session.expires_at.isoformat(),
        trace_id=context.trace_id,
    )


@router.post("/logout", response_model=LogoutResponse, responses=COMMON_ERROR_RESPONSES)
@audit_logout()
def logout(context: RequestContext = Depends(require_auth()), db=Depends(get_db)):
    AuthService(db).logout(context.session)
    return LogoutResponse(message="Logged out", trace_id=context.trace_id)


@router.get("/me", response_model=IdentityResponse, responses=COMMON_ERROR_RESPONSES)
def me(context: RequestContext = Depends(require_auth())):
    user = context.user
    return IdentityResponse(
        user_id=str(user.id),
        username=user.username,
        email=user.email,
        role=user.role.code,
        role_level=user.role.level,
        tenant_id=context.tenant_id or str(user.tenant_id),
        sector_id=context.sector_id or None,
        two_factor_enabled=user.is_2fa_enabled,
        two_factor_verified=context.two_factor_verified,
        trace_id=context.trace_id,
    )
