from __future__ import annotations

import logging
from typing import Callable, Optional

from .model import AuthSession

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[AuthSession]], None]


class SessionContext:
    """Who is signed in, passed explicitly to the code that needs it.

    Created when a request starts, updated on each auth event and torn down
    on sign-out. Listeners get the current value as soon as they subscribe
    and again on every change.
    """

    def __init__(self, session: Optional[AuthSession] = None):
        self._current = session
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> Optional[AuthSession]:
        return self._current

    @property
    def is_authenticated(self) -> bool:
        return self._current is not None

    @property
    def user_id(self) -> Optional[str]:
        return self._current.user_id if self._current else None

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        self._listeners.append(callback)
        callback(self._current)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def update(self, session: Optional[AuthSession]) -> None:
        if session == self._current:
            return
        self._current = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")

    def teardown(self) -> None:
        self.update(None)
        self._listeners.clear()
