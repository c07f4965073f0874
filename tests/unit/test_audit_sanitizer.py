from types import SimpleNamespace

from app.storehub.core.context import RequestContext
from app.storehub.services.audit import (
    REDACTED,
    audit_create,
    audit_delete,
    audit_update,
    build_audit_details,
    is_sensitive_field,
    outcome_for_status,
    sanitize_body,
)


def test_sanitize_redacts_nested_fields():
    body = {"name": "x", "password": "p", "nested": {"token": "t", "label": "keep"}}

    sanitized = sanitize_body(body)

    assert sanitized == {"name": "x", "password": REDACTED, "nested": {"token": REDACTED, "label": "keep"}}
    assert body["password"] == "p"


def test_sanitize_walks_lists_and_matches_substrings():
    body = [{"apiKey": "k"}, {"client_secret": "s"}, {"Authorization": "Bearer x"}, "plain"]

    assert sanitize_body(body) == [
        {"apiKey": REDACTED},
        {"client_secret": REDACTED},
        {"Authorization": REDACTED},
        "plain",
    ]


def test_sanitize_leaves_scalars_untouched():
    assert sanitize_body(None) is None
    assert sanitize_body("password") == "password"


def test_sensitive_field_is_case_insensitive():
    assert is_sensitive_field("PASSWORD_confirm")
    assert is_sensitive_field("refreshToken")
    assert not is_sensitive_field("name")


def test_outcome_for_status():
    assert outcome_for_status(201) == "success"
    assert outcome_for_status(403) == "failure"
    assert outcome_for_status(500) == "failure"


def test_audit_decorator_labels_endpoint():
    @audit_create("store")
    def endpoint():
        return "ok"

    assert endpoint() == "ok"
    assert endpoint.audit_label.action == "create"
    assert endpoint.audit_label.resource == "store"


def test_update_and_delete_labels():
    @audit_update("store", resource_id=lambda request: "s-1")
    def update():
        pass

    @audit_delete("store")
    def delete():
        pass

    assert update.audit_label.action == "update"
    assert update.audit_label.resource_id(None) == "s-1"
    assert delete.audit_label.action == "delete"


def test_build_details_includes_identity_and_sanitized_body():
    role = SimpleNamespace(code="MANAGER", level=3)
    user = SimpleNamespace(id="u-1", email="m@example.com", tenant_id="t-1", role=role)
    context = RequestContext(trace_id="trace", method="POST", path="/api/v1/stores", user=user, sector_id="pos")

    details = build_audit_details(
        context,
        method="POST",
        path="/api/v1/stores",
        query={},
        body={"name": "Main", "secret": "x"},
        status_code=201,
        response_size=42,
    )

    assert details["userId"] == "u-1"
    assert details["userEmail"] == "m@example.com"
    assert details["role"] == "MANAGER"
    assert details["tenantId"] == "t-1"
    assert details["sectorId"] == "pos"
    assert details["body"] == {"name": "Main", "secret": REDACTED}
    assert details["statusCode"] == 201
    assert details["responseSize"] == 42


def test_build_details_without_user():
    context = RequestContext(trace_id="trace", method="POST", path="/api/v1/auth/login")

    details = build_audit_details(
        context,
        method="POST",
        path="/api/v1/auth/login",
        query={},
        body=None,
        status_code=401,
        response_size=0,
    )

    assert "userId" not in details
    assert details["body"] is None
