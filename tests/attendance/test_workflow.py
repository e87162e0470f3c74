from __future__ import annotations

import threading
import time

import pytest

from datasender.attendance.ledger import MonthlyLedger
from datasender.attendance.model import LocationContext
from datasender.attendance.workflow import SubmissionWorkflow
from datasender.core.enums import SubmissionState
from datasender.core.exceptions import (
    DeliveryError,
    DeliveryTimeoutError,
    SubmissionInProgressError,
    ValidationError,
)
from datasender.delivery.base import DeliveryResult


@pytest.fixture
def ledger(draft, location, clock):
    ledger = MonthlyLedger(clock=clock)
    ledger.add_entry(draft(members="40", guests="5", offerings="120.50"), location)
    ledger.add_entry(draft(day="12", members="10", guests="0", offerings="30.00"), location)
    return ledger


def test_empty_ledger_never_reaches_submitting(fake_delivery, location):
    wf = SubmissionWorkflow(MonthlyLedger(), fake_delivery)

    with pytest.raises(ValidationError, match="No entries to submit"):
        wf.submit(location)

    assert wf.state == SubmissionState.IDLE
    assert fake_delivery.reports == []


def test_incomplete_location_is_rejected(fake_delivery, ledger):
    wf = SubmissionWorkflow(ledger, fake_delivery)

    with pytest.raises(ValidationError, match="District and Congregation"):
        wf.submit(LocationContext(district="North District"))

    assert wf.state == SubmissionState.IDLE
    assert len(ledger) == 2


def test_success_clears_ledger_and_hands_over_snapshot(fake_delivery, ledger, location, fixed_now):
    wf = SubmissionWorkflow(ledger, fake_delivery, clock=lambda: fixed_now)
    entries_before = ledger.entries

    snapshot = wf.submit(location, submitted_by="Test User")

    assert wf.state == SubmissionState.SUCCEEDED
    assert ledger.is_empty
    assert not ledger.locked
    assert fake_delivery.reports == [snapshot]
    assert snapshot.entries == tuple(entries_before)
    assert snapshot.totals.total_attendance == 55
    assert (snapshot.month, snapshot.year) == (3, 2026)
    assert snapshot.submitted_at == fixed_now
    assert snapshot.submitted_by == "Test User"
    assert snapshot.location == location
    assert wf.last_snapshot is snapshot

    wf.acknowledge()
    assert wf.state == SubmissionState.IDLE


def test_failed_result_keeps_ledger_unchanged(delivery_factory, ledger, location):
    delivery = delivery_factory(result=DeliveryResult.failure("SMTP is down"))
    wf = SubmissionWorkflow(ledger, delivery)
    before = ledger.entries

    with pytest.raises(DeliveryError, match="SMTP is down"):
        wf.submit(location)

    assert wf.state == SubmissionState.FAILED
    assert wf.last_error == "SMTP is down"
    assert ledger.entries == before
    assert not ledger.locked


def test_collaborator_exception_becomes_delivery_error(delivery_factory, ledger, location):
    wf = SubmissionWorkflow(ledger, delivery_factory(error=RuntimeError("boom")))

    with pytest.raises(DeliveryError):
        wf.submit(location)
    assert wf.state == SubmissionState.FAILED
    assert len(ledger) == 2


def test_timeout_is_a_failure(delivery_factory, ledger, location):
    wf = SubmissionWorkflow(ledger, delivery_factory(delay=0.5), timeout_seconds=0.05)

    with pytest.raises(DeliveryTimeoutError):
        wf.submit(location)
    assert wf.state == SubmissionState.FAILED
    assert len(ledger) == 2


def test_retry_waits_for_timed_out_delivery(delivery_factory, ledger, location):
    gate = threading.Event()
    delivery = delivery_factory(gate=gate)
    wf = SubmissionWorkflow(ledger, delivery, timeout_seconds=0.05)

    with pytest.raises(DeliveryTimeoutError):
        wf.submit(location)
    assert wf.state == SubmissionState.FAILED
    assert wf.delivery_pending

    with pytest.raises(SubmissionInProgressError, match="still being delivered"):
        wf.submit(location)
    assert len(delivery.reports) == 1
    assert len(ledger) == 2

    gate.set()
    deadline = time.monotonic() + 5
    while wf.delivery_pending and time.monotonic() < deadline:
        time.sleep(0.01)
    assert not wf.delivery_pending

    wf.submit(location)
    assert wf.state == SubmissionState.SUCCEEDED
    assert len(delivery.reports) == 2


def test_retry_after_failure(delivery_factory, ledger, location):
    delivery = delivery_factory(result=DeliveryResult.failure("try later"))
    wf = SubmissionWorkflow(ledger, delivery)
    with pytest.raises(DeliveryError):
        wf.submit(location)

    delivery.result = DeliveryResult.success()
    wf.submit(location)

    assert wf.state == SubmissionState.SUCCEEDED
    assert len(delivery.reports) == 2
    assert delivery.reports[0].entries == delivery.reports[1].entries


def test_one_submission_in_flight(delivery_factory, draft, ledger, location):
    gate = threading.Event()
    delivery = delivery_factory(gate=gate)
    wf = SubmissionWorkflow(ledger, delivery)
    errors = []

    def run():
        try:
            wf.submit(location)
        except Exception as e:  # pragma: no cover
            errors.append(e)

    worker = threading.Thread(target=run)
    worker.start()
    assert delivery.started.wait(2)

    assert wf.state == SubmissionState.SUBMITTING
    with pytest.raises(SubmissionInProgressError):
        wf.submit(location)
    with pytest.raises(SubmissionInProgressError):
        ledger.add_entry(draft(day="20"), location)
    with pytest.raises(SubmissionInProgressError):
        ledger.clear()

    gate.set()
    worker.join(5)

    assert errors == []
    assert wf.state == SubmissionState.SUCCEEDED
    assert len(delivery.reports) == 1
    assert ledger.is_empty
