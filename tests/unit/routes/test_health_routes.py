import pytest

from songlib.observability import record_song_operation


@pytest.mark.unit
def test_healthz_reports_database(client):
    resp = client.get('/healthz')

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "checks": {"database": "ok"}}


@pytest.mark.unit
def test_readyz_ready_with_configured_detail_client(client):
    resp = client.get('/readyz')

    assert resp.status_code == 200
    assert resp.get_json()["checks"]["detail_service"] == "configured"


@pytest.mark.unit
def test_readyz_blocked_without_detail_service(app, client, detail_client):
    detail_client.configured = False

    resp = client.get('/readyz')

    assert resp.status_code == 503
    assert resp.get_json()["status"] == "blocked"


@pytest.mark.unit
def test_metrics_exposes_song_counters(client):
    record_song_operation("create", "ok")

    resp = client.get('/metrics')

    assert resp.status_code == 200
    assert b"songlib_song_operations_total" in resp.data
