from __future__ import annotations

import logging

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, ValidationError
from .model import AuthSession
from .provider import IdentityProvider
from .session import SessionContext

logger = logging.getLogger(__name__)


class AuthService:
    """Use cases: sign in, sign up, sign out against the identity provider."""

    def __init__(self, provider: IdentityProvider):
        self._provider = provider

    def sign_in(self, context: SessionContext, email: str, password: str) -> AuthSession:
        email = require_email(email)
        if not password:
            raise ValidationError("Password is required")

        session = self._provider.sign_in(email, password)
        context.update(session)
        logger.info("User %s signed in", session.user_id)
        return session

    def sign_up(
        self,
        context: SessionContext,
        *,
        name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> AuthSession:
        name = require_non_empty(name, "Full Name")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        session = self._provider.sign_up(name, email, password)
        context.update(session)
        logger.info("User %s signed up", session.user_id)
        return session

    def sign_out(self, context: SessionContext) -> None:
        session = context.current
        if session is not None:
            try:
                self._provider.sign_out(session)
            except AuthenticationError as e:
                logger.warning("Provider sign-out failed for %s: %s", session.user_id, e)
            logger.info("User %s signed out", session.user_id)
        context.teardown()
