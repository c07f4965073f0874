from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Union

from app.storehub.core.context import RequestContext
from app.storehub.core.error_catalog import AppError, ErrorDefinition
from app.storehub.services.security_events import SecurityEventLog


@dataclass(frozen=True)
class SecurityEvent:
    name: str
    severity: str
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Continue:
    context: RequestContext


@dataclass(frozen=True)
class Reject:
    error: ErrorDefinition
    event: SecurityEvent | None = None
    message: str | None = None
    details: object | None = None

    def to_app_error(self) -> AppError:
        return AppError(self.error, details=self.details, message=self.message)


StageResult = Union[Continue, Reject]
Stage = Callable[[RequestContext], StageResult]


def event_details(context: RequestContext, **extra) -> dict:
    details = {"path": context.path, "ip": context.client_ip, "userAgent": context.user_agent}
    details.update({key: value for key, value in extra.items() if value is not None})
    return details


class PipelineRunner:
    def __init__(self, events: SecurityEventLog):
        self.events = events

    def run(self, context: RequestContext, stages: Iterable[Stage]) -> StageResult:
        current = context
        for stage in stages:
            result = stage(current)
            if isinstance(result, Reject):
                if result.event is not None:
                    self.events.record(result.event.name, result.event.details, result.event.severity)
                return result
            current = result.context
        return Continue(current)
