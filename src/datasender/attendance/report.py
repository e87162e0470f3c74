from __future__ import annotations

import io

import pandas as pd

from ..common.datetime_utils import month_name
from .model import LedgerSnapshot

REPORT_COLUMNS = ["Sheet #", "Date", "Service", "Members", "Guests", "Total", "Offerings", "Notes"]


def report_rows(snapshot: LedgerSnapshot) -> list[dict]:
    """Rows in sheet order, formatted the way the paper sheet shows them."""
    return [
        {
            "Sheet #": e.sheet_number,
            "Date": e.day,
            "Service": e.service_type.value,
            "Members": e.members,
            "Guests": e.guests,
            "Total": e.total_attendance,
            "Offerings": f"{e.offerings:.2f}",
            "Notes": e.notes,
        }
        for e in snapshot.entries
    ]


def report_title(snapshot: LedgerSnapshot) -> str:
    loc = snapshot.location
    return f"Monthly Sheet - {month_name(snapshot.month)} {snapshot.year} - {loc.district} - {loc.congregation}"


def report_filename(snapshot: LedgerSnapshot) -> str:
    loc = snapshot.location
    slug = "_".join(part.replace(" ", "-") for part in (loc.district, loc.congregation))
    return f"attendance_{snapshot.year}-{snapshot.month:02d}_{slug}.xlsx"


def report_summary(snapshot: LedgerSnapshot) -> str:
    t = snapshot.totals
    lines = [
        report_title(snapshot),
        "",
        f"Sheet numbers: {', '.join(snapshot.sheet_numbers) or '-'}",
        f"Entries: {t.entry_count}",
        f"Members: {t.total_members}",
        f"Guests: {t.total_guests}",
        f"Total attendance: {t.total_attendance}",
        f"Offerings: {t.total_offerings:.2f}",
        "",
        f"Submitted at {snapshot.submitted_at.isoformat(timespec='seconds')}"
        + (f" by {snapshot.submitted_by}" if snapshot.submitted_by else ""),
    ]
    return "\n".join(lines)


def report_to_xlsx(snapshot: LedgerSnapshot) -> bytes:
    """Render the sheet with a totals row as an Excel workbook."""
    df = pd.DataFrame(report_rows(snapshot), columns=REPORT_COLUMNS)
    t = snapshot.totals
    totals = pd.DataFrame(
        [
            {
                "Sheet #": "TOTAL",
                "Date": "",
                "Service": "",
                "Members": t.total_members,
                "Guests": t.total_guests,
                "Total": t.total_attendance,
                "Offerings": f"{t.total_offerings:.2f}",
                "Notes": f"{t.entry_count} entries",
            }
        ],
        columns=REPORT_COLUMNS,
    )
    df = pd.concat([df, totals], ignore_index=True)

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=f"{month_name(snapshot.month)} {snapshot.year}")
    return out.getvalue()
