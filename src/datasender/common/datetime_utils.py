from __future__ import annotations

from datetime import date, datetime

from ..core.constants import MONTH_NAMES


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock it easier.
    """
    return datetime.now()


def month_name(month: int) -> str:
    return MONTH_NAMES[int(month) - 1]
