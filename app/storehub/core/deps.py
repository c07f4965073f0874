from datetime import timedelta

from fastapi import Depends, Request

from app.storehub.core.config import settings
from app.storehub.core.context import RequestContext, get_request_context
from app.storehub.core.security import extract_bearer_token
from app.storehub.db.session import get_db
from app.storehub.repos.sessions import SessionRepository
from app.storehub.services.authentication import Authenticator
from app.storehub.services.pipeline import PipelineRunner, Reject, Stage
from app.storehub.services.security_events import SecurityEventLog


def get_security_events(request: Request) -> SecurityEventLog:
    return request.app.state.security_events


def build_authenticator(db) -> Authenticator:
    return Authenticator(
        SessionRepository(db),
        idle_timeout=timedelta(minutes=settings.SESSION_IDLE_TIMEOUT_MINUTES),
    )


def _run_pipeline(request: Request, stages: list[Stage]) -> RequestContext:
    context = get_request_context(request).with_route_params(request.path_params)
    result = PipelineRunner(get_security_events(request)).run(context, stages)
    if isinstance(result, Reject):
        raise result.to_app_error()
    request.state.context = result.context
    return result.context


def require_auth(*guards: Stage):
    """Authenticate the caller, then apply ``guards`` in order, stopping at the first rejection."""

    def dependency(request: Request, db=Depends(get_db)) -> RequestContext:
        token = extract_bearer_token(request.headers.get("Authorization"))
        authenticator = build_authenticator(db)
        return _run_pipeline(request, [authenticator.stage(token), *guards])

    return dependency


def optional_auth():
    def dependency(request: Request, db=Depends(get_db)) -> RequestContext:
        token = extract_bearer_token(request.headers.get("Authorization"))
        authenticator = build_authenticator(db)
        return _run_pipeline(request, [authenticator.optional_stage(token)])

    return dependency


__all__ = [
    "build_authenticator",
    "get_request_context",
    "get_security_events",
    "optional_auth",
    "require_auth",
]
