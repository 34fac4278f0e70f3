from __future__ import annotations

from datetime import date, datetime

from ..core.constants import SESSION_TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value, field_name: str = "date") -> date:
    """Accept a date, a datetime or an ISO string (date or datetime) and return the calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return parse_iso_date(text[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field_name} is not a valid date: {value!r}")


def format_iso_date(value) -> str:
    return coerce_date(value).strftime("%Y-%m-%d")


def normalize_session_time(value: str) -> str:
    """Validate a 24-hour session label and return it zero-padded (``9:05`` -> ``09:05``)."""
    try:
        parsed = datetime.strptime((value or "").strip(), SESSION_TIME_FORMAT)
    except ValueError:
        raise ValidationError(f"time must be HH:MM (24-hour), got {value!r}")
    return parsed.strftime(SESSION_TIME_FORMAT)


def now_local() -> datetime:
    """Current local time; tests pin it by patching this name where it is imported."""
    return datetime.now()
