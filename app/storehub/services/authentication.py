from __future__ import annotations

import ipaddress
import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from app.storehub.core.context import RequestContext
from app.storehub.core.error_catalog import ErrorCatalog
from app.storehub.core.security import TokenDecodeError, decode_token, is_token_expired
from app.storehub.services.authorization import is_super_admin
from app.storehub.services.pipeline import Continue, Reject, SecurityEvent, Stage, event_details

logger = logging.getLogger(__name__)


def is_user_active(user) -> bool:
    return user is not None and user.status == "active"


def is_session_usable(session, now: datetime, idle_timeout: timedelta) -> bool:
    if session is None or session.status != "active":
        return False
    if session.expires_at <= now:
        return False
    return now - session.last_activity_at <= idle_timeout


def is_ip_allowed(user, client_ip: str | None) -> bool:
    """Exact literal match against the user's allow-list."""
    if not client_ip:
        return False
    allowed = user.allowed_ips or []
    if client_ip in allowed:
        return True
    try:
        normalized = str(ipaddress.ip_address(client_ip))
    except ValueError:
        return False
    return normalized in allowed


class Authenticator:
    def __init__(self, sessions, *, idle_timeout: timedelta, clock=datetime.utcnow):
        self.sessions = sessions
        self.idle_timeout = idle_timeout
        self.clock = clock

    def authenticate(self, context: RequestContext, token: str | None):
        if not token:
            return Reject(
                ErrorCatalog.TOKEN_MISSING,
                SecurityEvent("authentication_failed", "medium", event_details(context, reason="missing_token")),
            )

        try:
            token_data = decode_token(token)
        except TokenDecodeError as exc:
            return Reject(
                ErrorCatalog.TOKEN_INVALID,
                SecurityEvent(
                    "authentication_failed",
                    "high",
                    event_details(context, reason="invalid_token", error=str(exc)),
                ),
            )

        if is_token_expired(token_data):
            return Reject(
                ErrorCatalog.TOKEN_EXPIRED,
                SecurityEvent(
                    "authentication_failed",
                    "medium",
                    event_details(context, reason="expired_token", userId=token_data.sub),
                ),
            )

        try:
            session = self.sessions.get_by_session_id(token_data.sid)
        except SQLAlchemyError:
            logger.exception("Authentication error", extra={"trace_id": context.trace_id})
            return Reject(ErrorCatalog.AUTH_ERROR)

        now = self.clock()
        if (
            session is None
            or str(session.user_id) != token_data.sub
            or not is_session_usable(session, now, self.idle_timeout)
        ):
            return Reject(
                ErrorCatalog.SESSION_INVALID,
                SecurityEvent(
                    "authentication_failed",
                    "high",
                    event_details(context, reason="invalid_session", userId=token_data.sub, sessionId=token_data.sid),
                ),
            )

        user = session.user
        if not is_user_active(user):
            return Reject(
                ErrorCatalog.USER_INACTIVE,
                SecurityEvent(
                    "authentication_failed",
                    "medium",
                    event_details(context, reason="inactive_user", userId=token_data.sub),
                ),
            )

        if user.is_ip_restricted and not is_ip_allowed(user, context.client_ip):
            return Reject(
                ErrorCatalog.IP_RESTRICTED,
                SecurityEvent(
                    "authentication_failed",
                    "high",
                    event_details(context, reason="ip_not_allowed", userId=token_data.sub),
                ),
            )

        if context.tenant is not None and str(user.tenant_id) != context.tenant_id and not is_super_admin(user.role):
            return Reject(
                ErrorCatalog.TENANT_MISMATCH,
                SecurityEvent(
                    "cross_tenant_access_attempt",
                    "high",
                    event_details(context, userId=token_data.sub, tenantId=context.tenant_id),
                ),
            )

        self._touch(session, now)
        logger.debug(
            "User authenticated successfully",
            extra={"user_id": token_data.sub, "role": user.role.code, "tenant_id": token_data.tenant_id},
        )
        return Continue(context.with_identity(user=user, session=session, token=token, tenant_id=token_data.tenant_id))

    def _touch(self, session, now: datetime) -> None:
        try:
            self.sessions.touch(session, now)
        except SQLAlchemyError:
            self.sessions.rollback()
            logger.warning("Failed to update session activity", extra={"session_id": session.session_id}, exc_info=True)

    def stage(self, token: str | None) -> Stage:
        def authenticate(context: RequestContext):
            return self.authenticate(context, token)

        return authenticate

    def optional_stage(self, token: str | None) -> Stage:
        def authenticate_if_possible(context: RequestContext):
            if not token:
                return Continue(context)
            result = self.authenticate(context, token)
            if isinstance(result, Reject):
                logger.debug("Optional authentication failed", extra={"code": result.error.code})
                return Continue(context)
            return result

        return authenticate_if_possible
