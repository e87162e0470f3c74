from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SUBMISSION_TIMEOUT_SECONDS
from ..core.enums import SubmissionState
from ..delivery.base import DeliveryCollaborator
from .ledger import MonthlyLedger
from .model import EntryDraft, LedgerSnapshot, LedgerTotals, LocationContext, ServiceEntry
from .workflow import SubmissionWorkflow

logger = logging.getLogger(__name__)


class AttendanceWorkspace:
    """One operator's attendance form: location, entry draft, ledger, workflow.

    Every operation holds the workspace lock except the delivery call itself,
    which the workflow runs after locking the ledger.
    """

    def __init__(
        self,
        delivery: DeliveryCollaborator,
        *,
        timeout_seconds: Optional[float] = DEFAULT_SUBMISSION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._lock = threading.RLock()
        self.location = LocationContext()
        self.draft = EntryDraft()
        self.ledger = MonthlyLedger(clock=clock)
        self.workflow = SubmissionWorkflow(
            self.ledger,
            delivery,
            timeout_seconds=timeout_seconds,
            clock=clock,
            lock=self._lock,
        )

    @property
    def state(self) -> SubmissionState:
        return self.workflow.state

    def set_location(self, *, district: str, congregation: str) -> LocationContext:
        with self._lock:
            self.location = LocationContext(district=district or "", congregation=congregation or "")
            return self.location

    def update_field(self, name: str, raw: Optional[str]) -> bool:
        with self._lock:
            return self.draft.apply(name, raw)

    def update_draft(self, form) -> list[str]:
        with self._lock:
            return self.draft.apply_form(form)

    def add_current_entry(self) -> ServiceEntry:
        with self._lock:
            entry = self.ledger.add_entry(self.draft, self.location)
            self.draft = self.draft.carry_forward()
            return entry

    def remove_entry(self, entry_id: int) -> bool:
        with self._lock:
            return self.ledger.remove_entry(entry_id)

    def clear_sheet(self) -> None:
        with self._lock:
            self.ledger.clear()

    def totals(self) -> LedgerTotals:
        with self._lock:
            return self.ledger.aggregate()

    def submit(self, *, submitted_by: Optional[str] = None) -> LedgerSnapshot:
        with self._lock:
            location = self.location
        return self.workflow.submit(location, submitted_by=submitted_by)

    def acknowledge(self) -> None:
        self.workflow.acknowledge()


class WorkspaceRegistry:
    """In-process map of user id -> workspace. Nothing survives a restart."""

    def __init__(
        self,
        delivery: DeliveryCollaborator,
        *,
        timeout_seconds: Optional[float] = DEFAULT_SUBMISSION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._delivery = delivery
        self._timeout = timeout_seconds
        self._clock = clock
        self._workspaces: dict[str, AttendanceWorkspace] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._workspaces)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._workspaces

    def get(self, user_id: str) -> AttendanceWorkspace:
        with self._lock:
            ws = self._workspaces.get(user_id)
            if ws is None:
                ws = AttendanceWorkspace(self._delivery, timeout_seconds=self._timeout, clock=self._clock)
                self._workspaces[user_id] = ws
            return ws

    def discard(self, user_id: str) -> None:
        with self._lock:
            if self._workspaces.pop(user_id, None) is not None:
                logger.debug("Dropped attendance workspace for %s", user_id)
