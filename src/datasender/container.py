from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.service import WorkspaceRegistry
from .auth.firebase_provider import FirebaseIdentityProvider
from .auth.local_provider import LocalIdentityProvider
from .auth.provider import IdentityProvider
from .auth.service import AuthService
from .core.exceptions import ConfigurationError
from .delivery.base import DeliveryCollaborator
from .delivery.log_service import LogDeliveryService
from .delivery.smtp_service import SmtpConfig, SmtpDeliveryService
from .returns.service import ReturnsService


@dataclass(frozen=True)
class Container:
    identity_provider: IdentityProvider
    delivery: DeliveryCollaborator

    auth_service: AuthService
    workspaces: WorkspaceRegistry
    returns_service: ReturnsService


def _setting(settings, name: str, default=None):
    return getattr(settings, name, default)


def build_identity_provider(settings) -> IdentityProvider:
    kind = str(_setting(settings, "IDENTITY_PROVIDER", "local")).lower()
    if kind == "firebase":
        return FirebaseIdentityProvider(
            str(_setting(settings, "FIREBASE_API_KEY", "")),
            timeout_seconds=float(_setting(settings, "AUTH_TIMEOUT_SECONDS", 10.0)),
        )
    if kind == "local":
        provider = LocalIdentityProvider()
        demo = str(_setting(settings, "DEMO_ACCOUNT", "") or "")
        if demo:
            email, _, rest = demo.partition(":")
            password, _, name = rest.partition(":")
            if email and password:
                provider.sign_up(name or email, email, password)
        return provider
    raise ConfigurationError(f"Unknown IDENTITY_PROVIDER: {kind}")


def build_delivery(settings) -> DeliveryCollaborator:
    kind = str(_setting(settings, "DELIVERY_BACKEND", "log")).lower()
    if kind == "log":
        return LogDeliveryService()
    if kind == "smtp":
        host = str(_setting(settings, "SMTP_HOST", "") or "")
        sender = str(_setting(settings, "MAIL_FROM", "") or "")
        recipients = list(_setting(settings, "REPORT_RECIPIENTS", []) or [])
        if not host or not sender or not recipients:
            raise ConfigurationError("SMTP delivery needs SMTP_HOST, MAIL_FROM and REPORT_RECIPIENTS")
        config = SmtpConfig(
            host=host,
            port=int(_setting(settings, "SMTP_PORT", 587)),
            user=_setting(settings, "SMTP_USER") or None,
            password=_setting(settings, "SMTP_PASSWORD") or None,
            use_tls=bool(_setting(settings, "SMTP_USE_TLS", True)),
        )
        return SmtpDeliveryService(config, sender=sender, recipients=recipients)
    raise ConfigurationError(f"Unknown DELIVERY_BACKEND: {kind}")


def build_container(
    settings,
    *,
    identity_provider: Optional[IdentityProvider] = None,
    delivery: Optional[DeliveryCollaborator] = None,
) -> Container:
    identity_provider = identity_provider or build_identity_provider(settings)
    delivery = delivery or build_delivery(settings)
    timeout = float(_setting(settings, "SUBMISSION_TIMEOUT_SECONDS", 30.0))

    auth_service = AuthService(identity_provider)
    workspaces = WorkspaceRegistry(delivery, timeout_seconds=timeout)
    returns_service = ReturnsService(
        delivery,
        timeout_seconds=timeout,
        max_attachments=int(_setting(settings, "MAX_ATTACHMENTS", 10)),
        max_attachment_bytes=int(_setting(settings, "MAX_ATTACHMENT_BYTES", 10 * 1024 * 1024)),
    )

    return Container(
        identity_provider=identity_provider,
        delivery=delivery,
        auth_service=auth_service,
        workspaces=workspaces,
        returns_service=returns_service,
    )
