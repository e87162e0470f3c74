from __future__ import annotations

import json
import logging

from ..attendance.model import LedgerSnapshot
from ..attendance.report import report_rows, report_title
from ..returns.model import ReturnRequest
from .base import DeliveryResult

logger = logging.getLogger(__name__)


class LogDeliveryService:
    """Development stand-in: writes the payload to the log and reports success."""

    def __init__(self):
        self.delivered: list = []

    def submit_report(self, snapshot: LedgerSnapshot) -> DeliveryResult:
        payload = {
            "title": report_title(snapshot),
            "rows": report_rows(snapshot),
            "totals": snapshot.totals.as_dict(),
            "submitted_at": snapshot.submitted_at.isoformat(),
        }
        logger.info("Monthly submission data: %s", json.dumps(payload, default=str))
        self.delivered.append(snapshot)
        return DeliveryResult.success("Logged", reference=f"log-{len(self.delivered)}")

    def submit_return(self, request: ReturnRequest) -> DeliveryResult:
        logger.info(
            "Return %s for %s: %s file(s), %s bytes",
            request.order_number,
            request.customer_name,
            len(request.attachments),
            request.total_attachment_bytes,
        )
        self.delivered.append(request)
        return DeliveryResult.success("Logged", reference=f"log-{len(self.delivered)}")
