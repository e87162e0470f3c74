from __future__ import annotations

import threading
import time
from datetime import datetime

import pytest

from datasender.attendance.model import EntryDraft, LocationContext
from datasender.delivery.base import DeliveryResult
from datasender.main import create_app


class FakeDelivery:
    """Records what it was asked to deliver; can fail, raise, stall or block."""

    def __init__(self, *, result=None, error=None, delay=0.0, gate=None):
        self.reports = []
        self.returns = []
        self.result = result or DeliveryResult.success("ok", reference="fake-1")
        self.error = error
        self.delay = delay
        self.gate = gate
        self.started = threading.Event()

    def _answer(self):
        self.started.set()
        if self.gate is not None:
            self.gate.wait(5)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    def submit_report(self, snapshot):
        self.reports.append(snapshot)
        return self._answer()

    def submit_return(self, request):
        self.returns.append(request)
        return self._answer()


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 8, 10, 0, 0)


@pytest.fixture
def clock(fixed_now):
    return lambda: fixed_now


@pytest.fixture
def location():
    return LocationContext(district="North District", congregation="Central Church")


@pytest.fixture
def fake_delivery():
    return FakeDelivery()


def make_draft(**overrides) -> EntryDraft:
    values = dict(
        sheet_number="001",
        day="5",
        month="3",
        year="2026",
        service_type="S",
        members="40",
        guests="5",
        offerings="120.50",
        notes="",
    )
    values.update(overrides)
    return EntryDraft(**values)


@pytest.fixture
def app(fake_delivery):
    app = create_app("datasender.settings.testing", delivery=fake_delivery)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signed_in_client(client):
    resp = client.post("/login", data={"email": "tester@example.com", "password": "secret123"})
    assert resp.status_code == 302
    return client


@pytest.fixture
def draft():
    return make_draft


@pytest.fixture
def delivery_factory():
    return FakeDelivery
