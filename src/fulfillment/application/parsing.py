"""Input coercion shared by the application handlers.

Everything here runs before a unit of work is opened, so malformed
input is rejected without touching the store.
"""

from __future__ import annotations

from datetime import date, datetime

from fulfillment.domain.exceptions import ValidationError


def parse_optional_date(value: date | str | None, field_name: str) -> date | None:
    """Accept a date, an ISO-8601 string, or None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as exc:
        raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD), got {value!r}") from exc


def clean_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
