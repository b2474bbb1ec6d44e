"""
Datetime normalization utilities.

Single source of truth for turning stored or user-supplied temporal
values into comparable instants and back into ISO-8601 strings.
"""

from datetime import date, datetime, timezone


def ensure_aware(dt: datetime) -> datetime:
    """Return dt as a timezone-aware datetime. Naive datetimes are assumed to be UTC."""
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def normalize_datetime(
    value: datetime | date | str | None,
    param_name: str = "datetime",
) -> tuple[datetime | None, str | None]:
    """
    Normalize a temporal value from various input formats.

    Args:
        value: A datetime, date, ISO-8601 string, or None
        param_name: Parameter name for error messages

    Returns:
        Tuple of (aware_datetime, error_message)
        - If successful: (datetime, None)
        - If value is None or blank: (None, None)
        - If failed: (None, error_string)
    """
    if value is None:
        return None, None

    if isinstance(value, datetime):
        return ensure_aware(value), None

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc), None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None, None

        # fromisoformat only accepts a trailing "Z" from 3.11 on
        try:
            return ensure_aware(datetime.fromisoformat(value.replace("Z", "+00:00"))), None
        except ValueError:
            return None, f"Invalid {param_name} format: '{value}'. Use ISO-8601, e.g. 2024-01-31T12:00:00+00:00"

    return None, f"Invalid {param_name} type: expected datetime or string, got {type(value).__name__}"


def to_instant(value) -> datetime | None:
    """
    Best-effort conversion of a stored property value to an aware datetime.

    Returns None for anything that is not a date-like value, so callers
    can treat it as a shape mismatch.
    """
    if isinstance(value, bool):
        return None
    instant, err = normalize_datetime(value)
    if err:
        return None
    return instant


def format_iso_datetime(dt: datetime) -> str:
    """
    Format a datetime as a canonical ISO-8601 string in UTC.

    Two datetimes denoting the same instant always format identically.
    """
    return ensure_aware(dt).astimezone(timezone.utc).isoformat()
