from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import PurePath
from typing import Optional

from ..core.constants import ACCEPTED_ATTACHMENT_EXTENSIONS, ACCEPTED_ATTACHMENT_TYPES
from ..core.enums import ReturnReason, Urgency


@dataclass(frozen=True)
class Attachment:
    """An uploaded supporting document, held in memory until delivery."""

    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower()

    @property
    def is_accepted_type(self) -> bool:
        content_type = (self.content_type or "").lower()
        if not content_type or content_type == "application/octet-stream":
            content_type = mimetypes.guess_type(self.filename)[0] or ""
        if content_type.startswith("image/"):
            return True
        return content_type in ACCEPTED_ATTACHMENT_TYPES or self.extension in ACCEPTED_ATTACHMENT_EXTENSIONS


@dataclass(frozen=True)
class ReturnRequest:
    """A validated product return, ready to be emailed with its documents."""

    return_date: date
    customer_name: str
    order_number: str
    customer_email: str
    quantity: int
    return_reason: ReturnReason
    urgency: Urgency
    attachments: tuple[Attachment, ...]
    submitted_at: datetime
    customer_phone: Optional[str] = None
    product_sku: Optional[str] = None
    product_name: Optional[str] = None
    additional_notes: Optional[str] = None
    submitted_by: Optional[str] = None

    @property
    def total_attachment_bytes(self) -> int:
        return sum(a.size for a in self.attachments)
