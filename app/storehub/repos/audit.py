from sqlalchemy import select

from app.storehub.db.models import AuditLog


class AuditRepository:
    def __init__(self, db):
        self.db = db

    def create(self, entry: AuditLog) -> AuditLog:
        self.db.add(entry)
        self.db.commit()
        return entry

    def list_recent(self, *, tenant_id=None, action: str | None = None, limit: int = 50):
        stmt = select(AuditLog)
        if tenant_id is not None:
            stmt = stmt.where(AuditLog.tenant_id == tenant_id)
        if action:
            stmt = stmt.where(AuditLog.action == action)
        stmt = stmt.order_by(AuditLog.created_at.desc()).limit(limit)
        return self.db.execute(stmt).scalars().all()
