"""
Tests for the backend API client: envelope handling, error mapping and the
one-shot token refresh
"""

import pytest
import requests

from cargodesk.admin_sessions import CreateSession
from cargodesk.api import backend_api
from cargodesk.api.backend_api import BackendAPI
from cargodesk.exceptions import (
    CargoDeskAuthError, CargoDeskNotFoundError, CargoDeskRequestError, CargoDeskServerError
)

from fakes import ADMIN_USER, Envelope, FakeResponse, ScriptedHttp

BASE_URL = "http://backend.test/api/v1"


@pytest.fixture
def http(monkeypatch):
    scripted = ScriptedHttp()
    monkeypatch.setattr(backend_api, "requests_session_factory", lambda: scripted)
    return scripted


@pytest.fixture
def session():
    return CreateSession(dict(ADMIN_USER), "old-token")


def test_envelope_is_unwrapped_and_token_attached(http, session):
    http.responses = [FakeResponse(200, Envelope([{"carrier_id": "c1"}]))]
    api = BackendAPI(BASE_URL, session=session)

    assert api.request("GET", "/master/carriers") == [{"carrier_id": "c1"}]
    call = http.calls[0]
    assert call["url"] == f"{BASE_URL}/master/carriers"
    assert call["headers"]["Authorization"] == "Bearer old-token"


def test_login_returns_user_and_token(http):
    http.responses = [FakeResponse(200, Envelope({"user": ADMIN_USER, "accessToken": "t1"}))]
    api = BackendAPI(BASE_URL)
    user, token = api.login("admin@cargodesk.io", "secret123")
    assert user == ADMIN_USER
    assert token == "t1"
    assert "Authorization" not in http.calls[0]["headers"]


def test_login_rejection_does_not_refresh(http):
    http.responses = [FakeResponse(401, {"success": False, "message": "Invalid credentials", "data": None})]
    api = BackendAPI(BASE_URL)
    with pytest.raises(CargoDeskAuthError):
        api.login("admin@cargodesk.io", "wrong")
    assert len(http.calls) == 1


def test_expired_token_is_refreshed_and_request_replayed(http, session):
    """401 -> one refresh -> replay with the new token"""
    http.responses = [
        FakeResponse(401, {"success": False, "message": "Token expired", "data": None}),
        FakeResponse(200, Envelope({"accessToken": "new-token"})),
        FakeResponse(200, Envelope({"carrier_id": "c1"})),
    ]
    api = BackendAPI(BASE_URL, session=session)

    assert api.request("GET", "/master/carriers/c1") == {"carrier_id": "c1"}
    assert [(c["method"], c["url"]) for c in http.calls] == [
        ("GET", f"{BASE_URL}/master/carriers/c1"),
        ("POST", f"{BASE_URL}/auth/refresh"),
        ("GET", f"{BASE_URL}/master/carriers/c1"),
    ]
    assert http.calls[2]["headers"]["Authorization"] == "Bearer new-token"
    assert session.token == "new-token"
    assert session.user == ADMIN_USER


def test_failed_refresh_logs_out(http, session):
    http.responses = [
        FakeResponse(401, {"success": False, "message": "Token expired", "data": None}),
        FakeResponse(401, {"success": False, "message": "Refresh token expired", "data": None}),
    ]
    api = BackendAPI(BASE_URL, session=session)

    with pytest.raises(CargoDeskAuthError):
        api.request("GET", "/master/carriers")
    assert session.token is None
    assert session.user is None


def test_rejected_replay_logs_out_without_second_refresh(http, session):
    http.responses = [
        FakeResponse(403, {"success": False, "message": "Forbidden", "data": None}),
        FakeResponse(200, Envelope({"accessToken": "new-token"})),
        FakeResponse(403, {"success": False, "message": "Forbidden", "data": None}),
    ]
    api = BackendAPI(BASE_URL, session=session)

    with pytest.raises(CargoDeskAuthError):
        api.request("GET", "/users")
    assert len(http.calls) == 3
    assert session.token is None


def test_status_codes_map_to_exceptions(http, session):
    http.responses = [
        FakeResponse(404, {"success": False, "message": "Carrier not found", "data": None}),
        FakeResponse(500, {"success": False, "message": "boom", "data": None}),
        FakeResponse(409, {"success": False, "message": "Carrier code already exists", "data": None}),
        FakeResponse(200, {"success": False, "message": "Validation failed", "data": None}),
    ]
    api = BackendAPI(BASE_URL, session=session)

    with pytest.raises(CargoDeskNotFoundError):
        api.request("GET", "/master/carriers/x")
    with pytest.raises(CargoDeskServerError):
        api.request("GET", "/master/carriers")
    with pytest.raises(CargoDeskRequestError) as conflict:
        api.request("POST", "/master/carriers", json={})
    assert conflict.value.status_code == 409
    assert str(conflict.value) == "Carrier code already exists"
    with pytest.raises(CargoDeskRequestError) as invalid:
        api.request("POST", "/master/carriers", json={})
    assert str(invalid.value) == "Validation failed"


def test_list_messages_are_joined(http, session):
    http.responses = [FakeResponse(400, {"message": ["name too short", "code required"]})]
    api = BackendAPI(BASE_URL, session=session)
    with pytest.raises(CargoDeskRequestError) as error:
        api.request("POST", "/master/carriers", json={})
    assert str(error.value) == "name too short; code required"


def test_connection_error_is_server_error(http, session):
    http.responses = [requests.exceptions.ConnectionError("refused")]
    api = BackendAPI(BASE_URL, session=session)
    with pytest.raises(CargoDeskServerError):
        api.request("GET", "/master/carriers")


def test_empty_body_returns_none(http, session):
    http.responses = [FakeResponse(204)]
    api = BackendAPI(BASE_URL, session=session)
    assert api.request("DELETE", "/master/carriers/c1") is None


def test_close_releases_http_session(http):
    api = BackendAPI(BASE_URL)
    api.close()
    assert http.closed
