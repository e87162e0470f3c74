from __future__ import annotations

from enum import Enum


class ServiceType(str, Enum):
    """Kind of church service an attendance entry records."""

    SUNDAY = "S"
    MIDWEEK = "M"

    @property
    def label(self) -> str:
        return "Sunday" if self is ServiceType.SUNDAY else "Midweek"


class SubmissionState(str, Enum):
    """States of the monthly sheet submission workflow."""

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    SUBMITTING = "SUBMITTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class ReturnReason(str, Enum):
    DEFECTIVE = "defective"
    WRONG_ITEM = "wrong-item"
    DAMAGED = "damaged"
    SIZE = "size"
    CHANGE_MIND = "change-mind"
    OTHER = "other"


class Urgency(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
