from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.exceptions import AuthenticationError
from .model import AuthSession


@dataclass(frozen=True)
class LocalAccount:
    user_id: str
    email: str
    display_name: str
    password_hash: str
    is_active: bool = True


class LocalIdentityProvider:
    """In-memory accounts for development and tests (no hosted provider needed)."""

    def __init__(self):
        self._accounts: dict[str, LocalAccount] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return (email or "").strip().lower()

    def get(self, email: str) -> Optional[LocalAccount]:
        return self._accounts.get(self._key(email))

    def sign_in(self, email: str, secret: str) -> AuthSession:
        account = self.get(email)
        if not account or not account.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(account.password_hash, secret)
        except Exception:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        return AuthSession(
            user_id=account.user_id,
            email=account.email,
            display_name=account.display_name,
            id_token=uuid.uuid4().hex,
        )

    def sign_up(self, name: str, email: str, secret: str) -> AuthSession:
        key = self._key(email)
        with self._lock:
            if key in self._accounts:
                raise AuthenticationError("An account with this email already exists")
            self._accounts[key] = LocalAccount(
                user_id=uuid.uuid4().hex,
                email=email.strip(),
                display_name=(name or "").strip(),
                password_hash=generate_password_hash(secret),
            )
        return self.sign_in(email, secret)

    def sign_out(self, session: AuthSession) -> None:
        return None
