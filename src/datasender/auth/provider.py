from __future__ import annotations

from typing import Protocol

from .model import AuthSession


class IdentityProvider(Protocol):
    """Hosted identity provider boundary.

    Implementations raise AuthenticationError with a message that can be
    shown to the user as-is.
    """

    def sign_in(self, email: str, secret: str) -> AuthSession:
        raise NotImplementedError

    def sign_up(self, name: str, email: str, secret: str) -> AuthSession:
        raise NotImplementedError

    def sign_out(self, session: AuthSession) -> None:
        raise NotImplementedError
