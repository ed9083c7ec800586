"""Value conversion helpers for import rows: presence, numbers and pt-BR dates."""

import math
import re
from datetime import date, datetime
from typing import Any

_BR_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")


def is_present(value: Any) -> bool:
    """True when a cell holds something other than blanks."""
    if value is None:
        return False
    return str(value).strip() != ""


def parse_number(value: Any) -> float | None:
    """Parse a cell as a finite number, or None when blank or not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if not is_present(value):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def coerce_int(value: Any) -> int | None:
    """Parse a numeric cell and truncate to an int."""
    number = parse_number(value)
    return int(number) if number is not None else None


def parse_br_date(value: Any) -> date | None:
    """Parse ``DD/MM/YYYY`` into a date, None if malformed or not a real day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not is_present(value):
        return None
    text = str(value).strip()
    if not _BR_DATE_RE.match(text):
        return None
    try:
        return datetime.strptime(text, "%d/%m/%Y").date()
    except ValueError:
        return None


def is_valid_br_date(value: Any) -> bool:
    return parse_br_date(value) is not None


def br_date_to_iso(value: Any) -> str | None:
    """Convert ``DD/MM/YYYY`` to ISO ``YYYY-MM-DD``.

    >>> br_date_to_iso("05/03/2024")
    '2024-03-05'
    """
    parsed = parse_br_date(value)
    return parsed.isoformat() if parsed else None


def iso_to_br_date(value: str | date | datetime | None) -> str:
    """Convert an ISO date (or date/datetime) to ``DD/MM/YYYY``; blank for None."""
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    return date.fromisoformat(str(value)[:10]).strftime("%d/%m/%Y")


def format_br_datetime(value: datetime | None) -> str:
    """Format a timestamp the way pt-BR locales display it."""
    if value is None:
        return ""
    return value.strftime("%d/%m/%Y %H:%M:%S")


def as_text(value: Any) -> str | None:
    """Stripped string for optional text cells, None when blank."""
    if not is_present(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
