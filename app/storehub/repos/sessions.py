from datetime import datetime

from sqlalchemy import select

from app.storehub.db.models import UserSession


class SessionRepository:
    def __init__(self, db):
        self.db = db

    def get_by_session_id(self, session_id: str):
        """Load an active session with its user, role and tenant."""
        stmt = select(UserSession).where(UserSession.session_id == session_id, UserSession.status == "active")
        return self.db.execute(stmt).unique().scalars().first()

    def create(self, session: UserSession) -> UserSession:
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def touch(self, session: UserSession, at: datetime) -> None:
        session.last_activity_at = at
        self.db.add(session)
        self.db.commit()

    def revoke(self, session: UserSession) -> UserSession:
        session.status = "revoked"
        self.db.add(session)
        self.db.commit()
        return session

    def rollback(self) -> None:
        self.db.rollback()
