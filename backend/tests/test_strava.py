import json
from urllib.parse import parse_qs

import httpx
import pytest
from fastapi.testclient import TestClient

from hrdrift.clients.strava import StravaClient, StravaSession
from hrdrift.core.config import Settings
from hrdrift.errors import StravaError, StravaNotLinked
from hrdrift.main import create_app

STREAMS = {
    "heartrate": {"data": [120, 130, 140], "series_type": "distance"},
    "time": {"data": [0, 900, 2700], "series_type": "distance"},
}


def _settings(**overrides):
    values = {
        "strava_client_id": "Test_Strava_Client_ID",
        "strava_client_secret": "Test_Strava_Client_Secret",
        "strava_redirect_uri": "http://localhost:8000/strava/callback",
        "strava_base_url": "https://strava.test",
    }
    values.update(overrides)
    return Settings(**values)


def _fake_strava(seen):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/oauth/token":
            form = parse_qs(request.content.decode())
            if form.get("code") != ["12345"]:
                return httpx.Response(400, text="bad code")
            return httpx.Response(200, json={"access_token": "The Test Token", "expires_at": 0})
        if request.url.path == "/api/v3/activities/42/streams":
            if request.headers.get("Authorization") != "Bearer The Test Token":
                return httpx.Response(401, json={"message": "Authorization Error"})
            return httpx.Response(200, json=STREAMS)
        if request.url.path == "/api/v3/activities/7/streams":
            return httpx.Response(200, json={"heartrate": {"data": [1]}})
        return httpx.Response(404, text="not found")

    return httpx.MockTransport(handler)


def _client(seen, calls, **overrides):
    cfg = _settings(**overrides)
    app = create_app(cfg, entry_point=lambda hr, t: calls.append((hr, t)))
    app.state.strava_client = StravaClient(cfg, transport=_fake_strava(seen))
    return TestClient(app)


def test_exchange_code_posts_credentials():
    seen = []
    client = StravaClient(_settings(), transport=_fake_strava(seen))
    tok = client.exchange_code("12345")
    assert tok["access_token"] == "The Test Token"

    form = parse_qs(seen[0].content.decode())
    assert form["client_id"] == ["Test_Strava_Client_ID"]
    assert form["client_secret"] == ["Test_Strava_Client_Secret"]
    assert form["grant_type"] == ["authorization_code"]


def test_exchange_code_error_status():
    client = StravaClient(_settings(), transport=_fake_strava([]))
    with pytest.raises(StravaError):
        client.exchange_code("wrong")


def test_unknown_host_path_is_error():
    client = StravaClient(_settings(), transport=_fake_strava([]))
    session = StravaSession({"access_token": "The Test Token"})
    with pytest.raises(StravaError):
        client.get_activity_streams(session, 999)


def test_streams_require_session():
    client = StravaClient(_settings(), transport=_fake_strava([]))
    with pytest.raises(StravaNotLinked):
        client.get_activity_streams(StravaSession(), 42)


def test_streams_request_shape():
    seen = []
    client = StravaClient(_settings(), transport=_fake_strava(seen))
    body = client.get_activity_streams(StravaSession({"access_token": "The Test Token"}), 42)
    assert json.loads(body) == STREAMS
    params = seen[0].url.params
    assert params["keys"] == "heartrate,time"
    assert params["key_by_type"] == "true"


def test_rejected_token_clears_session():
    client = StravaClient(_settings(), transport=_fake_strava([]))
    session = StravaSession({"access_token": "stale"})
    with pytest.raises(StravaNotLinked):
        client.get_activity_streams(session, 42)
    assert not session.is_authenticated()


def test_auth_url_requires_configuration():
    client = _client([], [], strava_client_id=None)
    r = client.get("/strava/auth_url")
    assert r.status_code == 400


def test_auth_url_contains_scope():
    client = _client([], [])
    r = client.get("/strava/auth_url")
    assert r.status_code == 200
    url = r.json()["url"]
    assert url.startswith("https://strava.test/oauth/authorize?")
    assert "activity%3Aread_all" in url


def test_callback_without_code_is_error():
    client = _client([], [])
    assert client.get("/strava/callback").status_code == 422


def test_callback_without_secret_is_error():
    client = _client([], [], strava_client_secret="")
    assert client.get("/strava/callback", params={"code": "12345"}).status_code == 400


def test_link_then_fetch_dispatches_streams():
    seen, calls = [], []
    client = _client(seen, calls)

    r = client.post("/strava/activities/42/drift")
    assert r.status_code == 401

    r = client.get("/strava/callback", params={"code": "12345"})
    assert r.status_code == 200, r.text
    assert client.get("/strava/status").json() == {"authenticated": True}

    r = client.post("/strava/activities/42/drift")
    assert r.status_code == 200, r.text
    assert r.json() == {"heartrate_samples": 3, "time_samples": 3}
    assert calls == [([120, 130, 140], [0, 900, 2700])]


def test_fetched_streams_missing_time():
    calls = []
    client = _client([], calls)
    client.get("/strava/callback", params={"code": "12345"})
    r = client.post("/strava/activities/7/drift")
    assert r.status_code == 422
    assert "time.data" in r.json()["detail"]
    assert calls == []


def test_upstream_failure_is_bad_gateway():
    client = _client([], [])
    client.get("/strava/callback", params={"code": "12345"})
    r = client.post("/strava/activities/999/drift")
    assert r.status_code == 502
