from __future__ import annotations

import itertools
import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterator, Optional, Sequence

from ..common.datetime_utils import month_name, now_local
from ..common.validators import (
    parse_count,
    parse_day,
    parse_month,
    parse_offerings,
    parse_sheet_number,
    parse_year,
)
from ..core.enums import ServiceType
from ..core.exceptions import SubmissionInProgressError, ValidationError
from .model import EntryDraft, LedgerTotals, LocationContext, ServiceEntry

logger = logging.getLogger(__name__)


class MonthlyLedger:
    """Ordered, in-memory list of service entries for one month and location.

    The period (month, year) is taken from the first entry and released again
    by :meth:`clear`. Totals are always folded from the current entries.
    """

    def __init__(self, *, clock: Callable[[], datetime] = now_local):
        self._entries: list[ServiceEntry] = []
        self._ids = itertools.count(1)
        self._clock = clock
        self._locked = False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ServiceEntry]:
        return iter(list(self._entries))

    @property
    def entries(self) -> Sequence[ServiceEntry]:
        return tuple(self._entries)

    @property
    def is_empty(self) -> bool:
        return not self._entries

    @property
    def period(self) -> Optional[tuple[int, int]]:
        if not self._entries:
            return None
        first = self._entries[0]
        return first.month, first.year

    @property
    def locked(self) -> bool:
        return self._locked

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def _ensure_unlocked(self) -> None:
        if self._locked:
            raise SubmissionInProgressError("The monthly sheet is being submitted, please wait")

    def add_entry(self, candidate: EntryDraft, location: LocationContext) -> ServiceEntry:
        """Validate ``candidate`` and append it.

        Raises ValidationError and leaves the ledger untouched when the
        location or any required field is missing or malformed.
        """
        self._ensure_unlocked()

        if not location.is_complete:
            raise ValidationError("Please enter District and Congregation")

        sheet_number = parse_sheet_number(candidate.sheet_number)
        day = parse_day(candidate.day)
        if not candidate.service_type:
            raise ValidationError("Service Type is required")
        try:
            service_type = ServiceType(candidate.service_type)
        except ValueError:
            raise ValidationError("Service Type must be S (Sunday) or M (Midweek)")

        month = parse_month(candidate.month)
        year = parse_year(candidate.year)
        members = parse_count(candidate.members, "Members")
        guests = parse_count(candidate.guests, "Guests")
        offerings = parse_offerings(candidate.offerings)

        period = self.period
        if period is not None and period != (month, year):
            raise ValidationError(
                f"This sheet holds entries for {month_name(period[0])} {period[1]}; "
                "submit or clear it before adding another month"
            )

        location = location.normalized()
        entry = ServiceEntry(
            entry_id=next(self._ids),
            sheet_number=sheet_number,
            day=day,
            month=month,
            year=year,
            service_type=service_type,
            members=members,
            guests=guests,
            offerings=offerings,
            notes=(candidate.notes or "").strip(),
            district=location.district,
            congregation=location.congregation,
            created_at=self._clock(),
        )
        self._entries.append(entry)
        logger.debug("Added entry %s for day %s (%s)", entry.entry_id, day, service_type.value)
        return entry

    def remove_entry(self, entry_id: int) -> bool:
        self._ensure_unlocked()
        for i, entry in enumerate(self._entries):
            if entry.entry_id == int(entry_id):
                del self._entries[i]
                return True
        return False

    def clear(self) -> None:
        self._ensure_unlocked()
        self._entries.clear()

    def aggregate(self) -> LedgerTotals:
        members = 0
        guests = 0
        offerings = Decimal("0.00")
        for e in self._entries:
            members += e.members
            guests += e.guests
            offerings += e.offerings
        return LedgerTotals(
            total_members=members,
            total_guests=guests,
            total_offerings=offerings,
            entry_count=len(self._entries),
        )

    def sheet_numbers(self) -> list[str]:
        return list(dict.fromkeys(e.sheet_number for e in self._entries))
