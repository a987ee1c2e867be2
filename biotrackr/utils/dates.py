"""Calendar date helpers for the YYYY-MM-DD strings used as document dates."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterator

from biotrackr.core.errors import InvalidArgumentError

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string naming a real calendar day."""
    if not isinstance(value, str) or not _ISO_DATE.fullmatch(value):
        raise InvalidArgumentError(f"Invalid date {value!r}; expected YYYY-MM-DD.")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidArgumentError(f"Invalid calendar date {value!r}.") from exc


def validate_date(value: str) -> str:
    """Return ``value`` unchanged when it is a valid date, else raise."""
    parse_date(value)
    return value


def previous_utc_day(now: datetime | None = None) -> str:
    """Return yesterday's date in UTC, the day the ingestion loop pulls."""
    current = now or datetime.now(timezone.utc)
    return (current.astimezone(timezone.utc).date() - timedelta(days=1)).isoformat()


def iter_dates(start: str, end: str) -> Iterator[str]:
    """Yield each day from ``start`` to ``end`` inclusive."""
    current = parse_date(start)
    last = parse_date(end)
    if current > last:
        raise InvalidArgumentError("Start date must be on or before end date.")
    while current <= last:
        yield current.isoformat()
        current += timedelta(days=1)


__all__ = ["iter_dates", "parse_date", "previous_utc_day", "validate_date"]
