import json

import pytest
import requests

from auth.errors import AuthApiError
from auth.supabase_auth import (
    PASSWORD_RECOVERY,
    SESSION_KEY,
    SIGNED_IN,
    SIGNED_OUT,
    TOKEN_REFRESHED,
    SupabaseAuth,
)
from conftest import make_session

NOW = 1_700_000_000


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body
        self.content = json.dumps(body).encode() if body is not None else b""
        self.text = self.content.decode()

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class FakeHttp:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, **kw):
        self.requests.append((method, url, kw))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def token_body(user_id="u-1"):
    return {
        "access_token": "new-access",
        "refresh_token": "new-refresh",
        "expires_in": 3600,
        "user": {"id": user_id, "email": "jane.doe@example.com"},
    }


def make_client(*responses, storage=None):
    http = FakeHttp(*responses)
    client = SupabaseAuth(
        "https://proj.supabase.co/",
        "anon",
        storage={} if storage is None else storage,
        http=http,
        clock=lambda: NOW,
    )
    return client, http


def record_events(client):
    events = []
    client.on_auth_state_change(lambda event, session: events.append(event))
    return events


def test_sign_in_stores_session_and_emits():
    client, http = make_client(FakeResponse(200, token_body()))
    events = record_events(client)

    session = client.sign_in_with_password(" jane.doe@example.com ", "pw")

    method, url, kw = http.requests[0]
    assert method == "POST"
    assert url == "https://proj.supabase.co/auth/v1/token"
    assert kw["params"] == {"grant_type": "password"}
    assert kw["json"]["email"] == "jane.doe@example.com"
    assert kw["headers"]["apikey"] == "anon"
    assert session.expires_at == NOW + 3600
    assert client.storage[SESSION_KEY] is session
    assert events == [SIGNED_IN]


def test_error_message_comes_from_backend():
    client, _ = make_client(FakeResponse(400, {"error_description": "Invalid login credentials"}))

    with pytest.raises(AuthApiError) as exc:
        client.sign_in_with_password("a@b.c", "wrong")

    assert exc.value.message == "Invalid login credentials"
    assert exc.value.status == 400
    assert SESSION_KEY not in client.storage


@pytest.mark.parametrize("body, expected", [
    ("rate limited", "rate limited"),
    (["bad", "request"], "['bad', 'request']"),
    ([], "HTTP 429"),
])
def test_non_object_error_body_is_auth_error(body, expected):
    client, _ = make_client(FakeResponse(429, body))

    with pytest.raises(AuthApiError) as exc:
        client.sign_in_with_password("a@b.c", "pw")

    assert exc.value.message == expected
    assert exc.value.status == 429


def test_network_error_is_auth_error():
    client, _ = make_client(requests.ConnectionError("down"))

    with pytest.raises(AuthApiError):
        client.reset_password_for_email("a@b.c")


def test_valid_session_returned_without_request():
    session = make_session()
    client, http = make_client(storage={SESSION_KEY: session})

    assert client.get_session() is session
    assert http.requests == []


def test_expired_session_is_refreshed():
    expired = make_session()
    expired.expires_at = NOW - 1
    client, http = make_client(FakeResponse(200, token_body()), storage={SESSION_KEY: expired})
    events = record_events(client)

    session = client.get_session()

    assert session.access_token == "new-access"
    assert http.requests[0][2]["params"] == {"grant_type": "refresh_token"}
    assert events == [TOKEN_REFRESHED]


def test_failed_refresh_signs_out_locally():
    expired = make_session()
    expired.expires_at = NOW - 1
    client, _ = make_client(FakeResponse(400, {"msg": "Invalid Refresh Token"}), storage={SESSION_KEY: expired})
    events = record_events(client)

    assert client.get_session() is None
    assert SESSION_KEY not in client.storage
    assert events == [SIGNED_OUT]


def test_sign_out_clears_even_when_server_fails():
    client, _ = make_client(FakeResponse(500, {"msg": "boom"}), storage={SESSION_KEY: make_session()})
    events = record_events(client)

    with pytest.raises(AuthApiError):
        client.sign_out()

    assert SESSION_KEY not in client.storage
    assert events == [SIGNED_OUT]


def test_update_user_requires_session():
    client, http = make_client()

    with pytest.raises(AuthApiError):
        client.update_user(password="s3cretpw")
    assert http.requests == []


def test_update_user_sends_password_with_token():
    client, http = make_client(
        FakeResponse(200, {"id": "u-1", "email": "jane.doe@example.com"}),
        storage={SESSION_KEY: make_session()},
    )

    client.update_user(password="s3cretpw")

    method, url, kw = http.requests[0]
    assert (method, url) == ("PUT", "https://proj.supabase.co/auth/v1/user")
    assert kw["json"] == {"password": "s3cretpw"}
    assert kw["headers"]["Authorization"] == "Bearer access"


def test_verify_recovery_emits_password_recovery():
    client, http = make_client(FakeResponse(200, token_body()))
    events = record_events(client)

    client.verify_recovery("hash-123")

    assert http.requests[0][2]["json"] == {"type": "recovery", "token_hash": "hash-123"}
    assert events == [PASSWORD_RECOVERY]


def test_sign_up_without_confirmation_has_no_session():
    client, http = make_client(FakeResponse(200, {"id": "u-2", "email": "new@x.com"}))

    assert client.sign_up("new@x.com", "pw123456", first_name="New") is None
    assert http.requests[0][2]["json"]["data"] == {"first_name": "New", "last_name": None}


def test_unsubscribe_is_idempotent():
    client, _ = make_client()
    sub = client.on_auth_state_change(lambda e, s: None)

    sub.unsubscribe()
    sub.unsubscribe()

    assert not sub.active
