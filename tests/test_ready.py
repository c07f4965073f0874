def test_ready(client):
    response = client.get("/ready")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ready"
    assert payload["trace_id"]


def test_ready_reports_unavailable_database(client, monkeypatch):
    from app.storehub.db import session as db_session

    monkeypatch.setattr(db_session, "check_database", lambda: False)

    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["code"] == "DB_UNAVAILABLE"
