from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import accepts_field
from ..core.enums import ServiceType


@dataclass(frozen=True)
class LocationContext:
    """District and congregation the monthly sheet belongs to."""

    district: str = ""
    congregation: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.district.strip()) and bool(self.congregation.strip())

    def normalized(self) -> "LocationContext":
        return LocationContext(district=self.district.strip(), congregation=self.congregation.strip())


@dataclass(frozen=True)
class ServiceEntry:
    """One service line on the monthly sheet."""

    entry_id: int
    sheet_number: str
    day: int
    month: int
    year: int
    service_type: ServiceType
    members: int
    guests: int
    offerings: Decimal
    notes: str
    district: str
    congregation: str
    created_at: datetime

    @property
    def total_attendance(self) -> int:
        return self.members + self.guests


@dataclass(frozen=True)
class LedgerTotals:
    total_members: int = 0
    total_guests: int = 0
    total_offerings: Decimal = Decimal("0.00")
    entry_count: int = 0

    @property
    def total_attendance(self) -> int:
        return self.total_members + self.total_guests

    def as_dict(self) -> dict:
        return {
            "total_members": self.total_members,
            "total_guests": self.total_guests,
            "total_attendance": self.total_attendance,
            "total_offerings": f"{self.total_offerings:.2f}",
            "entry_count": self.entry_count,
        }


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable copy of a ledger handed to the delivery collaborator."""

    location: LocationContext
    month: int
    year: int
    entries: tuple[ServiceEntry, ...]
    totals: LedgerTotals
    submitted_at: datetime
    submitted_by: Optional[str] = None

    @property
    def sheet_numbers(self) -> list[str]:
        return list(dict.fromkeys(e.sheet_number for e in self.entries))


def _current_month() -> str:
    return str(now_local().month)


def _current_year() -> str:
    return str(now_local().year)


@dataclass
class EntryDraft:
    """Raw values of the single-entry form, kept between requests."""

    sheet_number: str = ""
    day: str = ""
    month: str = field(default_factory=_current_month)
    year: str = field(default_factory=_current_year)
    service_type: str = ServiceType.SUNDAY.value
    members: str = ""
    guests: str = ""
    offerings: str = ""
    notes: str = ""

    FIELDS = ("sheet_number", "day", "month", "year", "service_type", "members", "guests", "offerings", "notes")

    def apply(self, name: str, raw: Optional[str]) -> bool:
        """Set a field if its keystroke filter accepts the value.

        Returns False (and keeps the old value) for rejected input or unknown
        field names.
        """
        if name not in self.FIELDS:
            return False
        raw = "" if raw is None else str(raw)
        if not accepts_field(name, raw):
            return False
        setattr(self, name, raw)
        return True

    def apply_form(self, form) -> list[str]:
        """Apply every known field present in ``form``; return the rejected names."""
        rejected = []
        for name in self.FIELDS:
            if name in form and not self.apply(name, form.get(name)):
                rejected.append(name)
        return rejected

    def carry_forward(self) -> "EntryDraft":
        """Fresh draft keeping the sheet number and the period."""
        return replace(
            EntryDraft(),
            sheet_number=self.sheet_number,
            month=self.month,
            year=self.year,
        )
