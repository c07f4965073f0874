from __future__ import annotations

import logging
import time
import uuid
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from app.storehub.core.context import RequestContext
from app.storehub.core.error_catalog import ErrorCatalog
from app.storehub.services.pipeline import Continue, Reject, SecurityEvent, Stage, event_details

logger = logging.getLogger(__name__)


def has_active_sector(tenant) -> bool:
    return any(link.is_active for link in tenant.tenant_sectors)


def is_subscription_active(tenant, now: datetime | None = None) -> bool:
    if tenant.subscription_end_date is None:
        return False
    return tenant.subscription_end_date > (now or datetime.utcnow())


def is_tenant_active(tenant, now: datetime | None = None) -> bool:
    return (
        tenant.is_active
        and tenant.status == "active"
        and is_subscription_active(tenant, now)
        and has_active_sector(tenant)
    )


def _as_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(value)
    except ValueError:
        return None


def match_sector(tenant, sector_identifier: str) -> str | None:
    """Return the code of the active tenant sector named by id or code."""
    wanted = sector_identifier.lower()
    wanted_id = _as_uuid(sector_identifier)
    for link in tenant.tenant_sectors:
        if not link.is_active or link.sector is None:
            continue
        if link.sector.code.lower() == wanted:
            return link.sector.code
        if wanted_id is not None and _as_uuid(str(link.sector_id)) == wanted_id:
            return link.sector.code
    return None


class TenantResolver:
    def __init__(self, repo, clock=datetime.utcnow):
        self.repo = repo
        self.clock = clock

    def resolve(self, identifier: str):
        return self.repo.get_by_identifier(identifier)

    def stage(
        self,
        tenant_identifier: str | None,
        sector_identifier: str | None,
        *,
        allow_anonymous: bool = False,
    ) -> Stage:
        def resolve_tenant(context: RequestContext):
            started = time.perf_counter()
            if not tenant_identifier:
                if allow_anonymous:
                    return Continue(context)
                logger.info("Tenant identifier missing", extra={"path": context.path})
                return Reject(ErrorCatalog.TENANT_IDENTIFIER_MISSING)

            try:
                tenant = self.resolve(tenant_identifier)
            except SQLAlchemyError:
                logger.exception("Error resolving tenant", extra={"identifier": tenant_identifier})
                return Reject(ErrorCatalog.TENANT_RESOLUTION_ERROR)

            if tenant is None:
                return Reject(
                    ErrorCatalog.TENANT_NOT_FOUND,
                    SecurityEvent(
                        "tenant_resolution_failed",
                        "high",
                        event_details(context, identifier=tenant_identifier),
                    ),
                )

            now = self.clock()
            if not is_subscription_active(tenant, now):
                end_date = tenant.subscription_end_date.isoformat() if tenant.subscription_end_date else None
                return Reject(
                    ErrorCatalog.SUBSCRIPTION_EXPIRED,
                    SecurityEvent(
                        "expired_subscription_access_attempt",
                        "medium",
                        event_details(context, tenantId=str(tenant.id), subscriptionEndDate=end_date),
                    ),
                )

            if not is_tenant_active(tenant, now):
                return Reject(
                    ErrorCatalog.TENANT_INACTIVE,
                    SecurityEvent(
                        "inactive_tenant_access_attempt",
                        "medium",
                        event_details(context, tenantId=str(tenant.id), tenantStatus=tenant.status),
                    ),
                )

            sector_code = match_sector(tenant, sector_identifier) if sector_identifier else None
            if sector_identifier and sector_code is None:
                return Reject(
                    ErrorCatalog.SECTOR_ACCESS_DENIED,
                    SecurityEvent(
                        "unauthorized_sector_access_attempt",
                        "high",
                        event_details(context, tenantId=str(tenant.id), sectorId=sector_identifier),
                    ),
                    message="You do not have access to this sector",
                )

            logger.debug(
                "Tenant resolved successfully",
                extra={
                    "tenant_id": str(tenant.id),
                    "sector_id": sector_code,
                    "resolution_ms": round((time.perf_counter() - started) * 1000, 2),
                },
            )
            return Continue(context.with_tenant(tenant, sector_code))

        return resolve_tenant
