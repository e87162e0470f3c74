"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

SHEET_NUMBER_LENGTH = 3
MIN_DAY = 1
MAX_DAY = 31
MIN_YEAR = 2000
MAX_YEAR = 2100
MAX_COUNT_DIGITS = 9

CENTS = Decimal("0.01")

DEFAULT_SUBMISSION_TIMEOUT_SECONDS = 30.0
DEFAULT_AUTH_TIMEOUT_SECONDS = 10.0
MIN_PASSWORD_LENGTH = 6

MAX_ATTACHMENTS = 10
MAX_ATTACHMENT_BYTES = 10 * 1024 * 1024
ACCEPTED_ATTACHMENT_EXTENSIONS = frozenset({".pdf", ".doc", ".docx", ".xls", ".xlsx"})
ACCEPTED_ATTACHMENT_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    }
)

MIN_RETURN_QUANTITY = 1
MAX_RETURN_QUANTITY = 100

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
