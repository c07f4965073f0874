import uuid

from sqlalchemy import func, or_, select

from app.storehub.db.models import Tenant


def _as_uuid(value: str) -> uuid.UUID | None:
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None


class TenantRepository:
    def __init__(self, db):
        self.db = db

    def get_by_identifier(self, identifier: str):
        """Match by id, subdomain or custom domain, then case-insensitive subdomain."""
        clauses = [Tenant.subdomain == identifier, Tenant.domain == identifier]
        tenant_uuid = _as_uuid(identifier)
        if tenant_uuid is not None:
            clauses.append(Tenant.id == tenant_uuid)
        tenant = self.db.execute(select(Tenant).where(or_(*clauses))).scalars().first()
        if tenant is not None:
            return tenant

        stmt = select(Tenant).where(func.lower(Tenant.subdomain) == identifier.lower())
        return self.db.execute(stmt).scalars().first()

    def list_all(self, *, status: str | None = None, limit: int | None = None, offset: int | None = None):
        stmt = select(Tenant)
        count_stmt = select(func.count()).select_from(Tenant)

        if status:
            normalized_status = status.strip().lower()
            stmt = stmt.where(func.lower(Tenant.status) == normalized_status)
            count_stmt = count_stmt.where(func.lower(Tenant.status) == normalized_status)

        stmt = stmt.order_by(Tenant.name.asc())
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)

        rows = self.db.execute(stmt).scalars().all()
        total = self.db.execute(count_stmt).scalar_one()
        return rows, total
