from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import require_email, require_non_empty
from ..core.constants import (
    DEFAULT_SUBMISSION_TIMEOUT_SECONDS,
    MAX_ATTACHMENT_BYTES,
    MAX_ATTACHMENTS,
    MAX_RETURN_QUANTITY,
    MIN_RETURN_QUANTITY,
)
from ..core.enums import ReturnReason, Urgency
from ..core.exceptions import DeliveryError, ValidationError
from ..delivery.base import DeliveryCollaborator, call_with_timeout
from .model import Attachment, ReturnRequest

logger = logging.getLogger(__name__)


def _today_iso() -> str:
    return now_local().date().isoformat()


@dataclass
class ReturnForm:
    """Raw values posted by the returns form."""

    customer_name: str = ""
    order_number: str = ""
    customer_email: str = ""
    customer_phone: str = ""
    product_sku: str = ""
    product_name: str = ""
    quantity: str = "1"
    return_reason: str = ReturnReason.DEFECTIVE.value
    urgency: str = Urgency.NORMAL.value
    additional_notes: str = ""
    return_date: str = field(default_factory=_today_iso)

    @classmethod
    def from_mapping(cls, data) -> "ReturnForm":
        form = cls()
        for f in fields(form):
            name = f.name
            if name in data and data.get(name) is not None:
                setattr(form, name, str(data.get(name)))
        return form


def _optional(value: str) -> Optional[str]:
    return (value or "").strip() or None


class ReturnsService:
    """Use case: validate a return request and hand it to the delivery collaborator."""

    def __init__(
        self,
        delivery: DeliveryCollaborator,
        *,
        timeout_seconds: Optional[float] = DEFAULT_SUBMISSION_TIMEOUT_SECONDS,
        max_attachments: int = MAX_ATTACHMENTS,
        max_attachment_bytes: int = MAX_ATTACHMENT_BYTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._delivery = delivery
        self._timeout = timeout_seconds
        self._max_attachments = int(max_attachments)
        self._max_bytes = int(max_attachment_bytes)
        self._clock = clock

    def check_attachments(self, attachments: Sequence[Attachment]) -> None:
        if not attachments:
            raise ValidationError("Please upload at least one document")
        if len(attachments) > self._max_attachments:
            raise ValidationError(f"At most {self._max_attachments} files can be attached")

        total = sum(a.size for a in attachments)
        if total > self._max_bytes:
            limit_mb = self._max_bytes / (1024 * 1024)
            raise ValidationError(f"Attachments exceed the {limit_mb:g}MB total limit")

        rejected = [a.filename for a in attachments if not a.is_accepted_type]
        if rejected:
            raise ValidationError(
                f"Unsupported file type: {', '.join(rejected)} (images, PDF, Word and Excel only)"
            )

    def build_request(
        self,
        form: ReturnForm,
        attachments: Sequence[Attachment],
        *,
        submitted_by: Optional[str] = None,
    ) -> ReturnRequest:
        if not (form.customer_name or "").strip() or not (form.order_number or "").strip() or not (
            form.customer_email or ""
        ).strip():
            raise ValidationError("Please fill in all required fields")

        customer_name = require_non_empty(form.customer_name, "Full Name")
        order_number = require_non_empty(form.order_number, "Order/Reference Number")
        customer_email = require_email(form.customer_email)

        try:
            quantity = int((form.quantity or "").strip())
        except ValueError:
            raise ValidationError("Quantity must be a whole number")
        if not MIN_RETURN_QUANTITY <= quantity <= MAX_RETURN_QUANTITY:
            raise ValidationError(f"Quantity must be between {MIN_RETURN_QUANTITY} and {MAX_RETURN_QUANTITY}")

        try:
            reason = ReturnReason(form.return_reason)
        except ValueError:
            raise ValidationError("Return reason is not valid")
        try:
            urgency = Urgency(form.urgency)
        except ValueError:
            raise ValidationError("Urgency is not valid")

        try:
            return_date: date = parse_iso_date((form.return_date or "").strip())
        except ValueError:
            raise ValidationError("Return date must be YYYY-MM-DD")

        self.check_attachments(attachments)

        return ReturnRequest(
            return_date=return_date,
            customer_name=customer_name,
            order_number=order_number,
            customer_email=customer_email,
            quantity=quantity,
            return_reason=reason,
            urgency=urgency,
            attachments=tuple(attachments),
            submitted_at=self._clock(),
            customer_phone=_optional(form.customer_phone),
            product_sku=_optional(form.product_sku),
            product_name=_optional(form.product_name),
            additional_notes=_optional(form.additional_notes),
            submitted_by=submitted_by,
        )

    def submit(
        self,
        form: ReturnForm,
        attachments: Sequence[Attachment],
        *,
        submitted_by: Optional[str] = None,
    ) -> ReturnRequest:
        request = self.build_request(form, attachments, submitted_by=submitted_by)
        logger.info(
            "Submitting return %s with %s attachment(s)", request.order_number, len(request.attachments)
        )

        try:
            result = call_with_timeout(lambda: self._delivery.submit_return(request), self._timeout)
        except DeliveryError as e:
            logger.warning("Return delivery failed: %s", e)
            raise
        except Exception as e:
            logger.exception("Return delivery raised an unexpected error")
            raise DeliveryError("The return could not be sent, please try again") from e

        if not result.ok:
            logger.warning("Return delivery rejected: %s", result.message)
            raise DeliveryError(result.message or "The return could not be sent, please try again")
        return request
