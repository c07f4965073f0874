from datetime import datetime, timedelta

from tests.helpers import auth_headers, create_tenant, create_user, login, record_events


def test_missing_tenant_identifier(client):
    response = client.get("/api/v1/catalog")

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["code"] == "TENANT_IDENTIFIER_MISSING"
    assert payload["trace_id"]


def test_unknown_tenant(client, db_session):
    events = record_events(client)

    response = client.get("/api/v1/catalog", headers={"X-Tenant-ID": "ghost"})

    assert response.status_code == 404
    assert response.json()["code"] == "TENANT_NOT_FOUND"
    assert events.names() == ["tenant_resolution_failed"]
    assert events.events[0][1] == "high"


def test_tenant_resolved_from_header_and_query(client, db_session):
    tenant = create_tenant(db_session, subdomain="acme")

    by_header = client.get("/api/v1/catalog", headers={"X-Tenant-ID": "acme"})
    by_query = client.get("/api/v1/catalog", params={"tenant": "acme"})
    by_id = client.get("/api/v1/catalog", headers={"X-Tenant-ID": str(tenant.id)})

    for response in (by_header, by_query, by_id):
        assert response.status_code == 200
        assert response.json()["tenant_id"] == str(tenant.id)
        assert response.json()["personalized"] is False


def test_tenant_resolved_from_subdomain(client, db_session):
    tenant = create_tenant(db_session, subdomain="acme")

    response = client.get("/api/v1/catalog", headers={"Host": "acme.storehub.test"})

    assert response.status_code == 200
    assert response.json()["tenant_id"] == str(tenant.id)


def test_tenant_resolved_from_token(client, db_session):
    tenant = create_tenant(db_session, subdomain="acme")
    create_user(db_session, tenant, username="casey")
    token = login(client, "casey", tenant="acme")

    response = client.get("/api/v1/catalog", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["tenant_id"] == str(tenant.id)
    assert response.json()["personalized"] is True


def test_expired_subscription_even_when_flag_active(client, db_session):
    create_tenant(db_session, subdomain="lapsed", subscription_end_date=datetime.utcnow() - timedelta(days=1))
    events = record_events(client)

    response = client.get("/api/v1/catalog", headers={"X-Tenant-ID": "lapsed"})

    assert response.status_code == 403
    assert response.json()["code"] == "SUBSCRIPTION_EXPIRED"
    assert events.names() == ["expired_subscription_access_attempt"]


def test_inactive_tenant(client, db_session):
    create_tenant(db_session, subdomain="paused", is_active=False)
    create_tenant(db_session, subdomain="nosectors", sectors=())

    for identifier in ("paused", "nosectors"):
        response = client.get("/api/v1/catalog", headers={"X-Tenant-ID": identifier})
        assert response.status_code == 403
        assert response.json()["code"] == "TENANT_INACTIVE"


def test_sector_not_granted_to_tenant(client, db_session):
    create_tenant(db_session, subdomain="shoponly", sectors=("pos",))
    events = record_events(client)

    response = client.get("/api/v1/catalog", headers={"X-Tenant-ID": "shoponly", "X-Sector-ID": "warehouse"})

    assert response.status_code == 403
    assert response.json()["code"] == "SECTOR_ACCESS_DENIED"
    assert events.names() == ["unauthorized_sector_access_attempt"]


def test_active_tenant_with_sector_reaches_handler(client, db_session):
    tenant = create_tenant(db_session, subdomain="acme")
    create_user(db_session, tenant, username="pos-clerk", sector_ids=["pos"])
    token = login(client, "pos-clerk", tenant="acme")

    response = client.get(
        "/api/v1/pos/summary",
        headers={**auth_headers(token, "acme"), "X-Sector-ID": "pos"},
    )

    assert response.status_code == 200
    assert response.json()["tenant_id"] == str(tenant.id)
    assert response.json()["sector_id"] == "pos"


def test_login_is_reachable_without_tenant(client, db_session):
    tenant = create_tenant(db_session, subdomain="acme")
    create_user(db_session, tenant, username="casey")

    response = client.post("/api/v1/auth/login", json={"username_or_email": "casey", "password": "Pass1234!"})

    assert response.status_code == 200
