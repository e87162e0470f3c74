"""Firebase Authentication over the Identity Toolkit REST API.

Only email/password accounts are supported. Tokens are kept in the session
for display purposes; the app does not call other Firebase services with them.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from ..core.constants import DEFAULT_AUTH_TIMEOUT_SECONDS
from ..core.exceptions import AuthenticationError, ConfigurationError
from .model import AuthSession

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"

_ERROR_MESSAGES = {
    "EMAIL_NOT_FOUND": "Invalid email or password",
    "INVALID_PASSWORD": "Invalid email or password",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password",
    "INVALID_EMAIL": "Email address is not valid",
    "MISSING_PASSWORD": "Password is required",
    "USER_DISABLED": "This account has been disabled",
    "EMAIL_EXISTS": "An account with this email already exists",
    "OPERATION_NOT_ALLOWED": "Email sign-in is not enabled for this app",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts, please try again later",
    "WEAK_PASSWORD": "Password should be at least 6 characters",
}


def _error_message(payload: Optional[dict]) -> str:
    code = ""
    if isinstance(payload, dict):
        code = str((payload.get("error") or {}).get("message") or "")
    # e.g. "WEAK_PASSWORD : Password should be at least 6 characters"
    key = code.split(":", 1)[0].strip()
    return _ERROR_MESSAGES.get(key, "Authentication failed, please try again")


class FirebaseIdentityProvider:
    def __init__(
        self,
        api_key: str,
        *,
        timeout_seconds: float = DEFAULT_AUTH_TIMEOUT_SECONDS,
        http: Optional[requests.Session] = None,
        base_url: str = IDENTITY_TOOLKIT_URL,
    ):
        if not api_key:
            raise ConfigurationError("FIREBASE_API_KEY must be set to use the Firebase identity provider")
        self._api_key = api_key
        self._timeout = timeout_seconds
        self._http = http or requests.Session()
        self._base_url = base_url.rstrip("/")

    def _post(self, method: str, payload: dict) -> dict:
        url = f"{self._base_url}/accounts:{method}"
        try:
            response = self._http.post(url, params={"key": self._api_key}, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning("Identity provider unreachable (%s): %s", method, e)
            raise AuthenticationError("Could not reach the sign-in service, please try again")

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code != 200:
            message = _error_message(data)
            logger.info("Identity provider rejected %s (%s): %s", method, response.status_code, message)
            raise AuthenticationError(message)
        if not isinstance(data, dict):
            raise AuthenticationError("Authentication failed, please try again")
        return data

    @staticmethod
    def _to_session(data: dict, *, display_name: str = "") -> AuthSession:
        return AuthSession(
            user_id=str(data.get("localId") or ""),
            email=str(data.get("email") or ""),
            display_name=str(data.get("displayName") or display_name or ""),
            id_token=data.get("idToken"),
            refresh_token=data.get("refreshToken"),
        )

    def sign_in(self, email: str, secret: str) -> AuthSession:
        data = self._post(
            "signInWithPassword",
            {"email": email, "password": secret, "returnSecureToken": True},
        )
        return self._to_session(data)

    def sign_up(self, name: str, email: str, secret: str) -> AuthSession:
        data = self._post(
            "signUp",
            {"email": email, "password": secret, "returnSecureToken": True},
        )
        if name:
            updated = self._post(
                "update",
                {"idToken": data.get("idToken"), "displayName": name, "returnSecureToken": True},
            )
            data = {**data, **{k: v for k, v in updated.items() if v}}
        return self._to_session(data, display_name=name)

    def sign_out(self, session: AuthSession) -> None:
        # ID tokens are short-lived and not stored server-side; dropping them is enough.
        logger.debug("Signed out %s", session.user_id)
