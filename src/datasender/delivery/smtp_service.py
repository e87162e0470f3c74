from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Callable, Optional, Sequence

from ..attendance.model import LedgerSnapshot
from ..attendance.report import report_filename, report_summary, report_title, report_to_xlsx
from ..returns.model import ReturnRequest
from .base import DeliveryResult

logger = logging.getLogger(__name__)

XLSX_MIME = ("application", "vnd.openxmlformats-officedocument.spreadsheetml.sheet")


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int = 587
    user: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True
    timeout_seconds: float = 20.0


class SmtpDeliveryService:
    """Email submitted sheets and returns to a fixed list of recipients."""

    def __init__(
        self,
        config: SmtpConfig,
        *,
        sender: str,
        recipients: Sequence[str],
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ):
        self._config = config
        self._sender = sender
        self._recipients = list(recipients)
        self._smtp_factory = smtp_factory

    def _new_message(self, subject: str, body: str, *, reply_to: Optional[str] = None) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._sender
        msg["To"] = ", ".join(self._recipients)
        msg["Message-ID"] = make_msgid(domain=self._sender.split("@")[-1] or None)
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(body)
        return msg

    def build_report_message(self, snapshot: LedgerSnapshot) -> EmailMessage:
        msg = self._new_message(report_title(snapshot), report_summary(snapshot))
        msg.add_attachment(
            report_to_xlsx(snapshot),
            maintype=XLSX_MIME[0],
            subtype=XLSX_MIME[1],
            filename=report_filename(snapshot),
        )
        return msg

    def build_return_message(self, request: ReturnRequest) -> EmailMessage:
        lines = [
            f"Return date: {request.return_date.isoformat()}",
            f"Customer: {request.customer_name} <{request.customer_email}>",
            f"Phone: {request.customer_phone or '-'}",
            f"Order/Reference: {request.order_number}",
            f"Product: {request.product_name or '-'} (SKU {request.product_sku or '-'})",
            f"Quantity: {request.quantity}",
            f"Reason: {request.return_reason.value}",
            f"Urgency: {request.urgency.value}",
            "",
            request.additional_notes or "",
        ]
        subject = f"Return {request.order_number} - {request.customer_name} [{request.urgency.value}]"
        msg = self._new_message(subject, "\n".join(lines).rstrip() + "\n", reply_to=request.customer_email)
        for a in request.attachments:
            maintype, _, subtype = (a.content_type or "application/octet-stream").partition("/")
            msg.add_attachment(a.data, maintype=maintype, subtype=subtype or "octet-stream", filename=a.filename)
        return msg

    def _send(self, msg: EmailMessage) -> DeliveryResult:
        if not self._recipients:
            return DeliveryResult.failure("No report recipients are configured")

        cfg = self._config
        try:
            with self._smtp_factory(cfg.host, cfg.port, timeout=cfg.timeout_seconds) as server:
                if cfg.use_tls:
                    server.starttls()
                if cfg.user:
                    server.login(cfg.user, cfg.password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP delivery to %s:%s failed: %s", cfg.host, cfg.port, e)
            return DeliveryResult.failure("The email could not be sent, please try again")

        logger.info("Sent '%s' to %s recipient(s)", msg["Subject"], len(self._recipients))
        return DeliveryResult.success("Email sent", reference=msg["Message-ID"])

    def submit_report(self, snapshot: LedgerSnapshot) -> DeliveryResult:
        return self._send(self.build_report_message(snapshot))

    def submit_return(self, request: ReturnRequest) -> DeliveryResult:
        return self._send(self.build_return_message(request))
