from app.storehub.services.rate_limit import RateLimiter
from tests.helpers import create_tenant, record_events


def test_hundred_and_first_request_is_throttled(client, db_session):
    create_tenant(db_session, subdomain="acme")
    events = record_events(client)
    headers = {"X-Tenant-ID": "acme"}

    statuses = [client.get("/api/v1/catalog", headers=headers).status_code for _ in range(100)]
    throttled = client.get("/api/v1/catalog", headers=headers)

    assert set(statuses) == {200}
    assert throttled.status_code == 429
    payload = throttled.json()
    assert payload["code"] == "RATE_LIMIT_EXCEEDED"
    assert payload["message"] == "Too many requests"
    assert int(throttled.headers["Retry-After"]) > 0
    assert events.names() == ["rate_limit_exceeded"]


def test_rate_limit_applies_before_tenant_resolution(client):
    client.app.state.rate_limiter = RateLimiter(max_requests=1, window_seconds=60)

    first = client.get("/api/v1/catalog")
    second = client.get("/api/v1/catalog")

    assert first.status_code == 400
    assert second.status_code == 429
    assert second.headers["X-Trace-ID"]


def test_health_probes_are_not_counted(client):
    limiter = RateLimiter(max_requests=1, window_seconds=60)
    client.app.state.rate_limiter = limiter

    probes = [client.get(path).status_code for path in ("/health", "/ready") * 5]
    first = client.get("/api/v1/catalog")
    second = client.get("/api/v1/catalog")

    assert set(probes) == {200}
    assert first.status_code == 400
    assert second.status_code == 429
