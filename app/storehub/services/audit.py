import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from app.storehub.core.context import RequestContext
from app.storehub.core.metrics import metrics
from app.storehub.db.models import AuditLog
from app.storehub.repos.audit import AuditRepository

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"
SENSITIVE_TERMS = ("password", "token", "secret", "key", "authorization")


def is_sensitive_field(name: str) -> bool:
    lowered = str(name).lower()
    return any(term in lowered for term in SENSITIVE_TERMS)


def sanitize_body(body: Any) -> Any:
    """Copy of ``body`` with every credential-like field redacted, at any depth."""
    if isinstance(body, dict):
        return {
            key: REDACTED if is_sensitive_field(key) else sanitize_body(value)
            for key, value in body.items()
        }
    if isinstance(body, list):
        return [sanitize_body(item) for item in body]
    return body


@dataclass(frozen=True)
class AuditLabel:
    action: str
    resource: str
    resource_id: Callable[[Any], str | None] | None = None


def audit_action(action: str, resource: str, resource_id: Callable[[Any], str | None] | None = None):
    """Mark a route endpoint as audited; the endpoint itself is returned unchanged."""

    def decorator(endpoint):
        endpoint.audit_label = AuditLabel(action=action, resource=resource, resource_id=resource_id)
        return endpoint

    return decorator


def audit_create(resource: str, resource_id=None):
    return audit_action("create", resource, resource_id)


def audit_read(resource: str, resource_id=None):
    return audit_action("read", resource, resource_id)


def audit_update(resource: str, resource_id=None):
    return audit_action("update", resource, resource_id)


def audit_delete(resource: str, resource_id=None):
    return audit_action("delete", resource, resource_id)


def audit_login():
    return audit_action("login", "user")


def audit_logout():
    return audit_action("logout", "user")


def audit_access(resource: str):
    return audit_action("access", resource)


@dataclass
class AuditEntryData:
    action: str
    resource: str
    status: str = "pending"
    resource_id: str | None = None
    details: dict = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
    duration: int | None = None
    error: str | None = None
    user_id: str | None = None
    tenant_id: str | None = None


def outcome_for_status(status_code: int) -> str:
    return "success" if 200 <= status_code < 300 else "failure"


def build_audit_details(
    context: RequestContext,
    *,
    method: str,
    path: str,
    query: dict,
    body: Any,
    status_code: int,
    response_size: int,
) -> dict:
    details: dict = {}
    user = context.user
    if user is not None:
        role = context.role
        details.update(
            {
                "userId": str(user.id),
                "userEmail": user.email,
                "role": getattr(role, "code", None) or "unknown",
                "tenantId": str(user.tenant_id),
            }
        )
    if context.tenant_id:
        details["tenantId"] = details.get("tenantId") or context.tenant_id
    if context.sector_id:
        details["sectorId"] = context.sector_id
    details.update(
        {
            "method": method,
            "path": path,
            "query": query,
            "body": sanitize_body(body),
            "statusCode": status_code,
            "responseSize": response_size,
        }
    )
    return details


class AuditRecorder:
    """Best-effort persistence of audit entries."""

    def __init__(self, session_factory, is_ready: Callable[[], bool] = lambda: True):
        self.session_factory = session_factory
        self.is_ready = is_ready

    def record(self, entry: AuditEntryData) -> None:
        try:
            if not self.is_ready():
                logger.warning("Database not initialized, skipping audit log entry")
                return
            db = self.session_factory()
            try:
                AuditRepository(db).create(
                    AuditLog(
                        action=entry.action,
                        resource=entry.resource,
                        resource_id=entry.resource_id,
                        details=entry.details,
                        status=entry.status,
                        ip_address=entry.ip_address,
                        user_agent=entry.user_agent,
                        duration=entry.duration,
                        error=entry.error,
                        user_id=entry.user_id or entry.details.get("userId"),
                        tenant_id=entry.tenant_id or entry.details.get("tenantId"),
                    )
                )
            finally:
                db.close()
            logger.debug(
                "Audit log entry created",
                extra={"action": entry.action, "resource": entry.resource, "status": entry.status},
            )
        except Exception:
            metrics.increment_audit_write_failure()
            logger.exception(
                "Failed to create audit log entry",
                extra={"action": entry.action, "resource": entry.resource},
            )
