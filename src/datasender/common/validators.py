"""Field validators shared by the attendance and returns forms.

Two layers live here:

* ``accepts_*`` predicates filter raw input while it is typed. They accept
  legal partial values (an empty string, ``"12."``) and reject anything that
  can never become legal.
* ``parse_*`` / ``require_*`` gates run at submit time and raise
  :class:`ValidationError` with a message fit for the operator.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from ..core.constants import (
    CENTS,
    MAX_COUNT_DIGITS,
    MAX_DAY,
    MAX_YEAR,
    MIN_DAY,
    MIN_YEAR,
    SHEET_NUMBER_LENGTH,
)
from ..core.exceptions import ValidationError

_SHEET_PARTIAL = re.compile(rf"\d{{0,{SHEET_NUMBER_LENGTH}}}", re.ASCII)
_SHEET = re.compile(rf"\d{{{SHEET_NUMBER_LENGTH}}}", re.ASCII)
_DAY_PARTIAL = re.compile(r"\d{0,2}", re.ASCII)
_COUNT = re.compile(rf"\d{{1,{MAX_COUNT_DIGITS}}}", re.ASCII)
_OFFERINGS_PARTIAL = re.compile(r"\d*\.?\d{0,2}", re.ASCII)
_EMAIL = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


def accepts_sheet_number(raw: str) -> bool:
    return raw == "" or bool(_SHEET_PARTIAL.fullmatch(raw))


def accepts_day(raw: str) -> bool:
    if raw == "":
        return True
    if not _DAY_PARTIAL.fullmatch(raw):
        return False
    return MIN_DAY <= int(raw) <= MAX_DAY


def accepts_count(raw: str) -> bool:
    return raw == "" or bool(_COUNT.fullmatch(raw))


def accepts_offerings(raw: str) -> bool:
    return raw == "" or bool(_OFFERINGS_PARTIAL.fullmatch(raw))


FIELD_FILTERS: dict[str, Callable[[str], bool]] = {
    "sheet_number": accepts_sheet_number,
    "day": accepts_day,
    "members": accepts_count,
    "guests": accepts_count,
    "offerings": accepts_offerings,
}


def accepts_field(field: str, raw: str) -> bool:
    """Keystroke filter for a draft field; fields without a filter take anything."""
    check = FIELD_FILTERS.get(field)
    return True if check is None else check(raw)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str], field_name: str = "Email address") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL.fullmatch(value):
        raise ValidationError(f"{field_name} is not a valid email address")
    return value


def parse_sheet_number(raw: Optional[str]) -> str:
    raw = (raw or "").strip()
    if not _SHEET.fullmatch(raw):
        raise ValidationError("Sheet Number must be 3 digits (001-999)")
    return raw


def parse_day(raw: Optional[str]) -> int:
    raw = (raw or "").strip()
    if not raw:
        raise ValidationError("Date is required")
    if not _DAY_PARTIAL.fullmatch(raw) or not MIN_DAY <= int(raw) <= MAX_DAY:
        raise ValidationError("Date must be a day between 1 and 31")
    return int(raw)


def parse_month(raw) -> int:
    try:
        month = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError("Month is not valid")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return month


def parse_year(raw) -> int:
    try:
        year = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError("Year is not valid")
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ValidationError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    return year


def parse_count(raw: Optional[str], field_name: str) -> int:
    """Empty counts are zero, the way the paper sheet treats a blank cell."""
    raw = (raw or "").strip()
    if not raw:
        return 0
    if not _COUNT.fullmatch(raw):
        raise ValidationError(f"{field_name} must be a whole number (at most {MAX_COUNT_DIGITS} digits)")
    return int(raw)


def parse_offerings(raw: Optional[str]) -> Decimal:
    raw = (raw or "").strip()
    if not raw or raw == ".":
        return Decimal("0.00")
    if not _OFFERINGS_PARTIAL.fullmatch(raw):
        raise ValidationError("Offerings must be an amount with at most 2 decimals")
    try:
        return Decimal(raw).quantize(CENTS)
    except InvalidOperation:
        raise ValidationError("Offerings must be an amount with at most 2 decimals")
