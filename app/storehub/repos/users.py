from sqlalchemy import select

from app.storehub.db.models import User


class UserRepository:
    def __init__(self, db):
        self.db = db

    def list_by_username_or_email(self, identifier: str, tenant_id=None):
        stmt = select(User).where((User.username == identifier) | (User.email == identifier))
        if tenant_id is not None:
            stmt = stmt.where(User.tenant_id == tenant_id)
        return self.db.execute(stmt).unique().scalars().all()
