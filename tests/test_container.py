from __future__ import annotations

from types import SimpleNamespace

import pytest

from datasender.auth.local_provider import LocalIdentityProvider
from datasender.container import build_container, build_delivery, build_identity_provider
from datasender.core.exceptions import ConfigurationError
from datasender.delivery.log_service import LogDeliveryService
from datasender.delivery.smtp_service import SmtpDeliveryService
from datasender.settings import env_list, get_settings_module


def test_local_provider_seeds_demo_account():
    provider = build_identity_provider(SimpleNamespace(IDENTITY_PROVIDER="local", DEMO_ACCOUNT="demo@example.com:pw1234:Demo"))

    assert isinstance(provider, LocalIdentityProvider)
    assert provider.sign_in("demo@example.com", "pw1234").display_name == "Demo"


def test_firebase_provider_needs_api_key():
    with pytest.raises(ConfigurationError):
        build_identity_provider(SimpleNamespace(IDENTITY_PROVIDER="firebase", FIREBASE_API_KEY=""))


def test_unknown_backends_are_rejected():
    with pytest.raises(ConfigurationError):
        build_identity_provider(SimpleNamespace(IDENTITY_PROVIDER="ldap"))
    with pytest.raises(ConfigurationError):
        build_delivery(SimpleNamespace(DELIVERY_BACKEND="fax"))


def test_smtp_delivery_requires_host_sender_and_recipients():
    with pytest.raises(ConfigurationError):
        build_delivery(SimpleNamespace(DELIVERY_BACKEND="smtp", SMTP_HOST="mail", MAIL_FROM="a@b.org", REPORT_RECIPIENTS=[]))

    delivery = build_delivery(
        SimpleNamespace(DELIVERY_BACKEND="smtp", SMTP_HOST="mail", MAIL_FROM="a@b.org", REPORT_RECIPIENTS=["r@b.org"])
    )
    assert isinstance(delivery, SmtpDeliveryService)


def test_container_shares_delivery():
    container = build_container(SimpleNamespace(SUBMISSION_TIMEOUT_SECONDS=1.0))

    assert isinstance(container.delivery, LogDeliveryService)
    assert container.workspaces.get("u1") is container.workspaces.get("u1")


@pytest.mark.parametrize(
    "env,module",
    [
        ("prod", "datasender.settings.production"),
        ("TESTING", "datasender.settings.testing"),
        ("anything", "datasender.settings.development"),
    ],
)
def test_settings_module_from_app_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == module


def test_env_list(monkeypatch):
    monkeypatch.setenv("REPORT_RECIPIENTS", " a@b.org, ,c@d.org ")
    assert env_list("REPORT_RECIPIENTS") == ["a@b.org", "c@d.org"]
