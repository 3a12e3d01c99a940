"""Common utilities for ProMan backend."""

from datetime import datetime, time, timezone
from decimal import Decimal

from .exceptions import ValidationError


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def sanitize_string(value: str | None, max_length: int = 255) -> str | None:
    """Sanitize a string value by stripping whitespace and truncating."""
    if value is None:
        return None
    value = value.strip()
    if len(value) > max_length:
        return value[:max_length]
    return value


def parse_datetime(
    value: str | None, field: str | None = None, end_of_day: bool = False
) -> datetime | None:
    """Parse an ISO-8601 date or datetime string.

    A bare ``YYYY-MM-DD`` becomes midnight, or 23:59:59.999999 when
    ``end_of_day`` is set so range upper bounds cover the whole day.

    Raises:
        ValidationError: If the value is not a valid ISO-8601 date/datetime
    """
    if value is None or value == "":
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(
            "Invalid date, expected YYYY-MM-DD or ISO-8601 datetime",
            field=field,
            value=value,
        ) from e

    if end_of_day and "T" not in value and " " not in value.strip():
        parsed = datetime.combine(parsed.date(), time.max, tzinfo=parsed.tzinfo)
    return parsed


def format_amount(value: Decimal | int | float | None) -> str:
    """Render a SQL aggregate as a decimal string, "0" when there is nothing."""
    if value is None:
        return "0"
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return str(value)


def drop_null_fields(values: dict, *fields: str) -> dict:
    """Remove explicit nulls for columns that cannot be cleared."""
    for field in fields:
        if field in values and values[field] is None:
            del values[field]
    return values
