from __future__ import annotations

import pytest

from datasender.auth.local_provider import LocalIdentityProvider
from datasender.auth.model import AuthSession
from datasender.auth.service import AuthService
from datasender.auth.session import SessionContext
from datasender.core.exceptions import AuthenticationError, ValidationError


@pytest.fixture
def provider():
    p = LocalIdentityProvider()
    p.sign_up("Ada", "ada@example.com", "right-password")
    return p


def test_sign_in_updates_context(provider):
    ctx = SessionContext()
    seen = []
    ctx.on_session_change(seen.append)

    session = AuthService(provider).sign_in(ctx, "ada@example.com", "right-password")

    assert ctx.current == session
    assert ctx.is_authenticated
    assert session.display_name == "Ada"
    assert seen == [None, session]


def test_wrong_password_raises_and_keeps_context_empty(provider):
    ctx = SessionContext()
    with pytest.raises(AuthenticationError):
        AuthService(provider).sign_in(ctx, "ada@example.com", "wrong")
    assert ctx.current is None


def test_sign_in_validates_input(provider):
    svc = AuthService(provider)
    with pytest.raises(ValidationError):
        svc.sign_in(SessionContext(), "not-an-email", "x")
    with pytest.raises(ValidationError):
        svc.sign_in(SessionContext(), "ada@example.com", "")


def test_sign_up_checks_password_rules(provider):
    svc = AuthService(provider)
    with pytest.raises(ValidationError, match="at least 6"):
        svc.sign_up(SessionContext(), name="Bo", email="bo@example.com", password="123", confirm_password="123")
    with pytest.raises(ValidationError, match="do not match"):
        svc.sign_up(SessionContext(), name="Bo", email="bo@example.com", password="123456", confirm_password="654321")
    with pytest.raises(AuthenticationError, match="already exists"):
        svc.sign_up(SessionContext(), name="Ada", email="ADA@example.com", password="123456", confirm_password="123456")


def test_sign_up_then_sign_in(provider):
    svc = AuthService(provider)
    ctx = SessionContext()
    created = svc.sign_up(ctx, name="Bo", email="bo@example.com", password="123456", confirm_password="123456")

    assert ctx.current == created
    assert svc.sign_in(SessionContext(), "bo@example.com", "123456").user_id == created.user_id


def test_sign_out_tears_context_down(provider):
    svc = AuthService(provider)
    ctx = SessionContext()
    svc.sign_in(ctx, "ada@example.com", "right-password")
    seen = []
    ctx.on_session_change(seen.append)

    svc.sign_out(ctx)

    assert ctx.current is None
    assert seen[-1] is None
    # listeners are dropped on teardown
    ctx.update(AuthSession(user_id="x", email="x@example.com"))
    assert seen[-1] is None


def test_unsubscribe_and_failing_listener():
    ctx = SessionContext()
    seen = []
    unsubscribe = ctx.on_session_change(seen.append)

    def broken(_session):
        if _session is not None:
            raise RuntimeError("listener bug")

    ctx.on_session_change(broken)
    unsubscribe()
    ctx.update(AuthSession(user_id="1", email="a@b.org"))

    assert seen == [None]
    assert ctx.user_id == "1"


def test_session_round_trips_through_dict():
    s = AuthSession(user_id="1", email="a@b.org", display_name="A", id_token="t")
    assert AuthSession.from_dict(s.to_dict()) == s
    assert AuthSession.from_dict({}) is None
    assert s.label == "A"
