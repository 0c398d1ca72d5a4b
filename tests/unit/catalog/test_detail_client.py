from datetime import date

import pytest
import requests

from songlib.domain.catalog import DetailFetchError, SongDetailClient
from tests.support.stubs import FakeHttpSession, FakeResponse, connection_error


def _client(session, base_url="http://detail.test/"):
    return SongDetailClient(base_url, timeout=2.5, session=session)


@pytest.mark.unit
def test_fetch_detail_parses_payload():
    session = FakeHttpSession(FakeResponse(payload={
        "releaseDate": "16.07.2006",
        "text": "line one\nline two",
        "link": "https://www.youtube.com/watch?v=Xsp3_a-PMTw",
    }))

    detail = _client(session).fetch_detail("Muse", "Supermassive Black Hole")

    assert detail.release_date == date(2006, 7, 16)
    assert detail.text == "line one\nline two"
    assert detail.link == "https://www.youtube.com/watch?v=Xsp3_a-PMTw"


@pytest.mark.unit
def test_fetch_detail_sends_group_and_song_with_timeout():
    session = FakeHttpSession()

    _client(session).fetch_detail("Muse", "Supermassive Black Hole")

    assert session.calls == [{
        "url": "http://detail.test/info",
        "params": {"group": "Muse", "song": "Supermassive Black Hole"},
        "headers": {"Accept": "application/json"},
        "timeout": 2.5,
    }]


@pytest.mark.unit
def test_missing_text_and_link_become_empty():
    session = FakeHttpSession(FakeResponse(payload={"releaseDate": "01.02.2003", "text": None}))

    detail = _client(session).fetch_detail("g", "s")

    assert detail.text == ""
    assert detail.link == ""


@pytest.mark.unit
@pytest.mark.parametrize("status", [201, 400, 404, 500, 503])
def test_non_200_status_is_a_failure(status):
    session = FakeHttpSession(FakeResponse(status_code=status, payload={"error": "nope"}))

    with pytest.raises(DetailFetchError) as excinfo:
        _client(session).fetch_detail("g", "s")

    assert str(status) in str(excinfo.value)


@pytest.mark.unit
def test_transport_error_is_a_failure():
    session = FakeHttpSession(error=connection_error())

    with pytest.raises(DetailFetchError):
        _client(session).fetch_detail("g", "s")


@pytest.mark.unit
@pytest.mark.parametrize("release_date", ["2006-07-16", "32.01.2006", "", None])
def test_unparseable_release_date_is_a_failure(release_date):
    session = FakeHttpSession(FakeResponse(payload={"releaseDate": release_date, "text": "", "link": ""}))

    with pytest.raises(DetailFetchError):
        _client(session).fetch_detail("g", "s")


@pytest.mark.unit
def test_non_json_body_is_a_failure():
    session = FakeHttpSession(FakeResponse(body="<html>oops</html>"))

    with pytest.raises(DetailFetchError):
        _client(session).fetch_detail("g", "s")


@pytest.mark.unit
def test_unconfigured_client_never_calls_out():
    session = FakeHttpSession()
    client = _client(session, base_url="")

    assert client.configured is False
    with pytest.raises(DetailFetchError):
        client.fetch_detail("g", "s")
    assert session.calls == []


@pytest.mark.unit
def test_failure_messages_do_not_leak_upstream_details():
    leaky = requests.ConnectionError("HTTPConnectionPool(host='detail.internal', port=8081): Max retries exceeded")
    transport = FakeHttpSession(error=leaky)
    garbage = FakeHttpSession(FakeResponse(payload={"releaseDate": "secret-internal-value"}))

    with pytest.raises(DetailFetchError) as unreachable:
        _client(transport).fetch_detail("g", "s")
    with pytest.raises(DetailFetchError) as undecodable:
        _client(garbage).fetch_detail("g", "s")

    assert str(unreachable.value) == "failed to reach external detail service"
    assert str(undecodable.value) == "invalid response from external detail service"
    assert unreachable.value.__cause__ is leaky


@pytest.mark.unit
def test_create_route_hides_upstream_error_text(database_uri):
    import app as app_module

    leaky = requests.ConnectionError("HTTPConnectionPool(host='detail.internal', port=8081)")
    application = app_module.create_app(
        {"TESTING": True, "SQLALCHEMY_DATABASE_URI": database_uri},
        detail_client=SongDetailClient("http://detail.internal:8081", session=FakeHttpSession(error=leaky)),
    )

    resp = application.test_client().post('/songs', json={"group": "Muse", "title": "Starlight"})

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "failed to reach external detail service"}
