from app.storehub.core.context import RequestContext
from app.storehub.core.error_catalog import AppError, ErrorCatalog
from app.storehub.services.pipeline import Continue, PipelineRunner, Reject, SecurityEvent, event_details


class _Events:
    def __init__(self):
        self.recorded = []

    def record(self, event, details=None, severity="medium"):
        self.recorded.append((event, severity, details))


def _context() -> RequestContext:
    return RequestContext(trace_id="trace", method="GET", path="/x", client_ip="1.2.3.4", user_agent="pytest")


def test_stages_receive_the_evolved_context():
    seen = []

    def first(context):
        return Continue(context.with_route_params({"store_id": "s-1"}))

    def second(context):
        seen.append(context.route_params)
        return Continue(context)

    result = PipelineRunner(_Events()).run(_context(), [first, second])

    assert isinstance(result, Continue)
    assert seen == [{"store_id": "s-1"}]


def test_runner_stops_at_first_rejection_and_emits_its_event():
    events = _Events()
    calls = []

    def reject(context):
        calls.append("reject")
        return Reject(ErrorCatalog.TOKEN_MISSING, SecurityEvent("authentication_failed", "medium", {"reason": "x"}))

    def never(context):
        calls.append("never")
        return Continue(context)

    result = PipelineRunner(events).run(_context(), [reject, never])

    assert isinstance(result, Reject)
    assert calls == ["reject"]
    assert events.recorded == [("authentication_failed", "medium", {"reason": "x"})]


def test_rejection_without_event_emits_nothing():
    events = _Events()

    PipelineRunner(events).run(_context(), [lambda context: Reject(ErrorCatalog.SECTOR_ID_MISSING)])

    assert events.recorded == []


def test_reject_converts_to_app_error():
    error = Reject(ErrorCatalog.NOT_FOUND, message="Store not found", details={"id": 1}).to_app_error()

    assert isinstance(error, AppError)
    assert error.message == "Store not found"
    assert error.details == {"id": 1}


def test_event_details_drop_empty_values():
    details = event_details(_context(), userId=None, reason="missing_token")

    assert details == {"path": "/x", "ip": "1.2.3.4", "userAgent": "pytest", "reason": "missing_token"}
