from __future__ import annotations

from app.storehub.core.context import RequestContext
from app.storehub.core.error_catalog import ErrorCatalog
from app.storehub.services.pipeline import Continue, Reject, SecurityEvent, Stage, event_details

SUPER_ADMIN = "SUPER_ADMIN"
TENANT_OWNER = "TENANT_OWNER"
ADMIN = "ADMIN"
MANAGER = "MANAGER"
STAFF = "STAFF"
VIEWER = "VIEWER"

ROLE_LEVELS = {
    SUPER_ADMIN: 0,
    TENANT_OWNER: 1,
    ADMIN: 2,
    MANAGER: 3,
    STAFF: 4,
    VIEWER: 5,
}


def is_super_admin(role) -> bool:
    return role is not None and role.code == SUPER_ADMIN


def is_tenant_owner(role) -> bool:
    return role is not None and role.code == TENANT_OWNER


def meets_role_level(role, max_level: int) -> bool:
    return role is not None and role.level <= max_level


def effective_permissions(user, role) -> set[str]:
    granted = set(getattr(role, "permissions", None) or [])
    granted.update(getattr(user, "extra_permissions", None) or [])
    return granted


def has_permission(user, role, action: str, resource: str) -> bool:
    granted = effective_permissions(user, role)
    return bool({"*", f"{resource}:*", f"{resource}:{action}"} & granted)


def can_access_sector(user, role, sector_id: str) -> bool:
    if is_super_admin(role) or is_tenant_owner(role):
        return True
    allowed = {str(item).lower() for item in (getattr(user, "sector_ids", None) or [])}
    return sector_id.lower() in allowed


def _authentication_required(context: RequestContext) -> Reject | None:
    if context.user is None:
        return Reject(ErrorCatalog.AUTHENTICATION_REQUIRED)
    return None


def _denial_details(context: RequestContext, **extra) -> dict:
    role = context.role
    return event_details(context, userId=context.user_id, role=getattr(role, "code", None), **extra)


def require_super_admin() -> Stage:
    def guard(context: RequestContext):
        missing = _authentication_required(context)
        if missing:
            return missing
        if not is_super_admin(context.role):
            return Reject(
                ErrorCatalog.INSUFFICIENT_PERMISSIONS,
                SecurityEvent("unauthorized_access_attempt", "high", _denial_details(context, requiredRole=SUPER_ADMIN)),
                message="Super Admin access required",
            )
        return Continue(context)

    return guard


def require_tenant_owner() -> Stage:
    def guard(context: RequestContext):
        missing = _authentication_required(context)
        if missing:
            return missing
        role = context.role
        if not (is_tenant_owner(role) or is_super_admin(role)):
            return Reject(
                ErrorCatalog.INSUFFICIENT_PERMISSIONS,
                SecurityEvent(
                    "unauthorized_access_attempt",
                    "medium",
                    _denial_details(context, requiredRole=TENANT_OWNER),
                ),
                message="Tenant Owner access required",
            )
        return Continue(context)

    return guard


def require_sector_access(param: str = "sector_id") -> Stage:
    def guard(context: RequestContext):
        missing = _authentication_required(context)
        if missing:
            return missing
        sector_id = context.sector_id or context.route_params.get(param)
        if not sector_id:
            return Reject(ErrorCatalog.SECTOR_ID_MISSING)
        if not can_access_sector(context.user, context.role, sector_id):
            return Reject(
                ErrorCatalog.SECTOR_ACCESS_DENIED,
                SecurityEvent("unauthorized_sector_access", "high", _denial_details(context, sectorId=sector_id)),
            )
        return Continue(context)

    return guard


def require_permission(resource: str, action: str) -> Stage:
    def guard(context: RequestContext):
        missing = _authentication_required(context)
        if missing:
            return missing
        if not has_permission(context.user, context.role, action, resource):
            return Reject(
                ErrorCatalog.INSUFFICIENT_PERMISSIONS,
                SecurityEvent(
                    "unauthorized_permission_access",
                    "medium",
                    _denial_details(context, resource=resource, action=action),
                ),
                message=f"Permission denied: {action} on {resource}",
            )
        return Continue(context)

    return guard


def require_role(max_level: int) -> Stage:
    """Admit roles whose level is at most ``max_level`` (lower is more privileged)."""

    def guard(context: RequestContext):
        missing = _authentication_required(context)
        if missing:
            return missing
        if not meets_role_level(context.role, max_level):
            return Reject(
                ErrorCatalog.INSUFFICIENT_ROLE_LEVEL,
                SecurityEvent("unauthorized_role_access", "medium", _denial_details(context, requiredLevel=max_level)),
            )
        return Continue(context)

    return guard


def require_2fa() -> Stage:
    def guard(context: RequestContext):
        missing = _authentication_required(context)
        if missing:
            return missing
        if context.user.is_2fa_enabled and not context.two_factor_verified:
            return Reject(ErrorCatalog.TWO_FACTOR_REQUIRED)
        return Continue(context)

    return guard
