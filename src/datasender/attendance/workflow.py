from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SUBMISSION_TIMEOUT_SECONDS
from ..core.enums import SubmissionState
from ..core.exceptions import DeliveryError, SubmissionInProgressError, ValidationError
from ..delivery.base import DeliveryCollaborator, start_delivery, wait_for_delivery
from .ledger import MonthlyLedger
from .model import LedgerSnapshot, LocationContext

logger = logging.getLogger(__name__)


class SubmissionWorkflow:
    """State machine guarding the hand-off of a monthly sheet.

    IDLE/FAILED -> VALIDATING -> SUBMITTING -> SUCCEEDED | FAILED, and back
    to IDLE on :meth:`acknowledge`. Only one submission may be in flight; the
    ledger is locked against edits until the delivery call settles.

    A delivery that times out keeps running on its worker thread and may
    still arrive. The sheet is marked FAILED and editable again, but a retry
    is refused until that call has finished, so one sheet is never sent twice
    at the same time.
    """

    def __init__(
        self,
        ledger: MonthlyLedger,
        delivery: DeliveryCollaborator,
        *,
        timeout_seconds: Optional[float] = DEFAULT_SUBMISSION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = now_local,
        lock: Optional[threading.RLock] = None,
    ):
        self._ledger = ledger
        self._delivery = delivery
        self._timeout = timeout_seconds
        self._clock = clock
        self._lock = lock or threading.RLock()
        self._state = SubmissionState.IDLE
        self.last_error: Optional[str] = None
        self.last_snapshot: Optional[LedgerSnapshot] = None
        self._pending: Optional[Future] = None

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def is_submitting(self) -> bool:
        return self._state == SubmissionState.SUBMITTING

    @property
    def delivery_pending(self) -> bool:
        """True while an earlier (possibly timed-out) delivery call is still running."""
        pending = self._pending
        return pending is not None and not pending.done()

    def acknowledge(self) -> None:
        with self._lock:
            if self._state in (SubmissionState.SUCCEEDED, SubmissionState.FAILED):
                self._state = SubmissionState.IDLE

    def _begin(self, location: LocationContext, submitted_by: Optional[str]) -> LedgerSnapshot:
        with self._lock:
            if self.is_submitting:
                raise SubmissionInProgressError("A submission is already in progress")
            if self.delivery_pending:
                raise SubmissionInProgressError(
                    "The previous submission is still being delivered, please wait before retrying"
                )
            if self._state == SubmissionState.SUCCEEDED:
                self._state = SubmissionState.IDLE

            previous = self._state
            self._state = SubmissionState.VALIDATING
            try:
                if self._ledger.is_empty:
                    raise ValidationError("No entries to submit")
                if not location.is_complete:
                    raise ValidationError("Please enter District and Congregation before submitting")
            except ValidationError:
                self._state = previous
                raise

            month, year = self._ledger.period
            snapshot = LedgerSnapshot(
                location=location.normalized(),
                month=month,
                year=year,
                entries=tuple(self._ledger.entries),
                totals=self._ledger.aggregate(),
                submitted_at=self._clock(),
                submitted_by=submitted_by,
            )
            self._ledger.lock()
            self._state = SubmissionState.SUBMITTING
            return snapshot

    def _fail(self, message: str) -> None:
        with self._lock:
            self._ledger.unlock()
            self._state = SubmissionState.FAILED
            self.last_error = message

    def submit(self, location: LocationContext, *, submitted_by: Optional[str] = None) -> LedgerSnapshot:
        """Deliver the current ledger.

        Raises ValidationError (state unchanged), SubmissionInProgressError, or
        DeliveryError after moving to FAILED with the ledger left as it was.
        """
        snapshot = self._begin(location, submitted_by)
        logger.info(
            "Submitting %s entries for %s - %s (%s/%s)",
            snapshot.totals.entry_count,
            snapshot.location.district,
            snapshot.location.congregation,
            snapshot.month,
            snapshot.year,
        )

        try:
            with self._lock:
                pending = self._pending = start_delivery(lambda: self._delivery.submit_report(snapshot))
            result = wait_for_delivery(pending, self._timeout)
        except DeliveryError as e:
            logger.warning("Monthly sheet delivery failed: %s", e)
            self._fail(str(e))
            raise
        except Exception as e:
            logger.exception("Monthly sheet delivery raised an unexpected error")
            self._fail("The report could not be sent, please try again")
            raise DeliveryError(self.last_error) from e

        if not result.ok:
            message = result.message or "The report could not be sent, please try again"
            logger.warning("Monthly sheet delivery rejected: %s", message)
            self._fail(message)
            raise DeliveryError(message)

        with self._lock:
            self._ledger.unlock()
            self._ledger.clear()
            self._state = SubmissionState.SUCCEEDED
            self.last_error = None
            self.last_snapshot = snapshot
        logger.info("Monthly sheet delivered (reference=%s)", result.reference)
        return snapshot
