"""Whole calendar-day helpers shared by the 90/180 rule and the CSV codec.

Dates are naive ``datetime.date`` values. Strings are accepted only in the strict
``YYYY-MM-DD`` form and must name a real day (no Feb 30).
"""
from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Iterator

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidDate(ValueError):
    """A value is not a real calendar day in YYYY-MM-DD form."""


def parse_iso_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDate(f"Invalid date: {value!r}")
    if not ISO_DATE_RE.match(value):
        raise InvalidDate(f"Invalid date: {value}")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidDate(f"Invalid date: {value}") from e


def is_valid_iso_date(value: str) -> bool:
    try:
        parse_iso_date(value)
    except InvalidDate:
        return False
    return True


def format_iso_date(d: date) -> str:
    return d.isoformat()


def to_ordinal(d: date) -> int:
    return d.toordinal()


def from_ordinal(n: int) -> date:
    return date.fromordinal(n)


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, both inclusive."""
    for n in range(to_ordinal(start), to_ordinal(end) + 1):
        yield from_ordinal(n)


def today() -> date:
    """Local calendar day. Call at the boundary and pass the result down."""
    return date.today()
