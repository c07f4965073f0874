from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

from fastapi import Request


@dataclass(frozen=True)
class RequestContext:
    """Per-request identity and tenancy snapshot.

    Stages never mutate a context; they return an evolved copy through
    ``with_tenant`` / ``with_identity`` so every field is written once.
    """

    trace_id: str
    method: str
    path: str
    client_ip: str | None = None
    user_agent: str | None = None
    tenant: Any = None
    tenant_id: str | None = None
    sector_id: str | None = None
    user: Any = None
    session: Any = None
    token: str | None = None
    two_factor_verified: bool = False
    route_params: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self):
        return getattr(self.user, "role", None) if self.user is not None else None

    @property
    def user_id(self) -> str | None:
        return str(self.user.id) if self.user is not None else None

    def with_tenant(self, tenant, sector_id: str | None) -> RequestContext:
        return replace(self, tenant=tenant, tenant_id=str(tenant.id), sector_id=sector_id or "")

    def with_route_params(self, params: Mapping[str, str]) -> RequestContext:
        return replace(self, route_params=dict(params))

    def with_identity(self, *, user, session, token: str, tenant_id: str | None) -> RequestContext:
        return replace(
            self,
            user=user,
            session=session,
            token=token,
            tenant_id=self.tenant_id or tenant_id,
            two_factor_verified=bool(user.is_2fa_verified),
        )


def build_request_context(request: Request) -> RequestContext:
    client = request.client
    return RequestContext(
        trace_id=getattr(request.state, "trace_id", ""),
        method=request.method,
        path=request.url.path,
        client_ip=client.host if client else None,
        user_agent=request.headers.get("User-Agent"),
    )


def get_request_context(request: Request) -> RequestContext:
    context = getattr(request.state, "context", None)
    if isinstance(context, RequestContext):
        return context
    return build_request_context(request)
