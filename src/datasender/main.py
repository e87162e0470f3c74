from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .auth.provider import IdentityProvider
from .container import build_container
from .core.logging_config import setup_logging
from .delivery.base import DeliveryCollaborator
from .returns.controller import register as register_returns
from .settings import get_settings_module

logger = logging.getLogger(__name__)


def create_app(
    settings_module: Optional[str] = None,
    *,
    identity_provider: Optional[IdentityProvider] = None,
    delivery: Optional[DeliveryCollaborator] = None,
) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    # Attachments are capped at 10MB total; leave headroom for the other form fields.
    max_bytes = int(getattr(settings, "MAX_ATTACHMENT_BYTES", 10 * 1024 * 1024))
    app.config["MAX_CONTENT_LENGTH"] = max_bytes + 1024 * 1024
    app.config["MAX_ATTACHMENTS"] = int(getattr(settings, "MAX_ATTACHMENTS", 10))

    container = build_container(settings, identity_provider=identity_provider, delivery=delivery)
    app.extensions["datasender"] = container

    logger.info(
        "settings=%s identity=%s delivery=%s",
        settings_module,
        type(container.identity_provider).__name__,
        type(container.delivery).__name__,
    )

    register_auth(app, container)
    register_attendance(app, container)
    register_returns(app, container)

    return app
