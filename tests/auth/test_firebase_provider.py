from __future__ import annotations

import pytest
import requests

from datasender.auth.firebase_provider import FirebaseIdentityProvider
from datasender.core.exceptions import AuthenticationError, ConfigurationError


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeHttp:
    def __init__(self, *responses, error=None):
        self._responses = list(responses)
        self.error = error
        self.calls = []

    def post(self, url, *, params, json, timeout):
        self.calls.append({"url": url, "params": params, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self._responses.pop(0)


def test_requires_api_key():
    with pytest.raises(ConfigurationError):
        FirebaseIdentityProvider("")


def test_sign_in_maps_response():
    http = FakeHttp(
        FakeResponse(200, {"localId": "uid-1", "email": "a@b.org", "displayName": "Ann", "idToken": "tok", "refreshToken": "ref"})
    )
    provider = FirebaseIdentityProvider("key", http=http, timeout_seconds=3)

    session = provider.sign_in("a@b.org", "pw123456")

    assert session.user_id == "uid-1"
    assert session.display_name == "Ann"
    assert session.id_token == "tok"
    call = http.calls[0]
    assert call["url"].endswith("/accounts:signInWithPassword")
    assert call["params"] == {"key": "key"}
    assert call["json"]["returnSecureToken"] is True
    assert call["timeout"] == 3


@pytest.mark.parametrize(
    "code,message",
    [
        ("INVALID_LOGIN_CREDENTIALS", "Invalid email or password"),
        ("EMAIL_NOT_FOUND", "Invalid email or password"),
        ("USER_DISABLED", "disabled"),
        ("SOMETHING_NEW", "Authentication failed"),
    ],
)
def test_sign_in_errors(code, message):
    http = FakeHttp(FakeResponse(400, {"error": {"code": 400, "message": code}}))
    with pytest.raises(AuthenticationError, match=message):
        FirebaseIdentityProvider("key", http=http).sign_in("a@b.org", "pw")


def test_network_error_becomes_auth_error():
    http = FakeHttp(error=requests.ConnectionError("offline"))
    with pytest.raises(AuthenticationError, match="Could not reach"):
        FirebaseIdentityProvider("key", http=http).sign_in("a@b.org", "pw")


def test_sign_up_sets_display_name():
    http = FakeHttp(
        FakeResponse(200, {"localId": "uid-2", "email": "b@b.org", "idToken": "tok1"}),
        FakeResponse(200, {"localId": "uid-2", "email": "b@b.org", "displayName": "Bea", "idToken": "tok2"}),
    )
    session = FirebaseIdentityProvider("key", http=http).sign_up("Bea", "b@b.org", "pw123456")

    assert session.display_name == "Bea"
    assert session.id_token == "tok2"
    assert http.calls[1]["url"].endswith("/accounts:update")
    assert http.calls[1]["json"]["idToken"] == "tok1"


def test_weak_password_message():
    http = FakeHttp(FakeResponse(400, {"error": {"message": "WEAK_PASSWORD : Password should be at least 6 characters"}}))
    with pytest.raises(AuthenticationError, match="at least 6"):
        FirebaseIdentityProvider("key", http=http).sign_up("Bea", "b@b.org", "123")
