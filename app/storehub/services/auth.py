import secrets
from datetime import datetime, timedelta

from app.storehub.core.config import settings
from app.storehub.core.error_catalog import AppError, ErrorCatalog
from app.storehub.core.security import create_session_token, verify_password
from app.storehub.db.models import UserSession
from app.storehub.repos.sessions import SessionRepository
from app.storehub.repos.users import UserRepository
from app.storehub.services.authentication import is_user_active


class AuthService:
    def __init__(self, db):
        self.users = UserRepository(db)
        self.sessions = SessionRepository(db)

    def login(
        self,
        identifier: str,
        password: str,
        *,
        tenant_id: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ):
        candidates = self.users.list_by_username_or_email(identifier, tenant_id=tenant_id)
        inactive_match = None
        for user in candidates:
            if not verify_password(password, user.hashed_password):
                continue
            if not is_user_active(user):
                inactive_match = user
                continue
            session, token = self._open_session(user, ip_address=ip_address, user_agent=user_agent)
            return user, session, token

        if inactive_match is not None:
            raise AppError(ErrorCatalog.USER_INACTIVE)
        raise AppError(ErrorCatalog.INVALID_CREDENTIALS)

    def logout(self, session: UserSession) -> UserSession:
        return self.sessions.revoke(session)

    def _open_session(self, user, *, ip_address: str | None, user_agent: str | None):
        lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        now = datetime.utcnow()
        session = self.sessions.create(
            UserSession(
                session_id=secrets.token_hex(24),
                user_id=user.id,
                status="active",
                ip_address=ip_address,
                user_agent=user_agent,
                last_activity_at=now,
                created_at=now,
                expires_at=now + lifetime,
            )
        )
        token = create_session_token(user, session.session_id, expires_delta=lifetime)
        return session, token
