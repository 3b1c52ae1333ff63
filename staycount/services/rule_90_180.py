"""The 90/180 rule: at most 90 days present in any trailing 180-day window.

Every function here is pure. ``stays`` may be ORM rows, ``StayRecord`` values or
anything else with ``country``, ``entry_date`` and ``exit_date``; dates may be
``date`` objects or ``YYYY-MM-DD`` strings. Input collections are never mutated.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, NamedTuple, Sequence

from staycount.schemas.stay import StayRecord
from staycount.services.calendar import (
    InvalidDate,
    add_days,
    iter_days,
    parse_iso_date,
    to_ordinal,
    today,
)
from staycount.services.zones import filter_stays

WINDOW_DAYS = 180
MAX_STAY_DAYS = 90
# Bound on the next-entry probe
NEXT_ENTRY_SEARCH_DAYS = 365

NEXT_ENTRY_COMPLIANT_NOW = "compliant_now"
NEXT_ENTRY_FOUND = "found"
NEXT_ENTRY_SEARCH_EXHAUSTED = "search_exhausted"


class NextEntry(NamedTuple):
    status: str
    date: date | None


def _bounds(stay) -> tuple[date, date]:
    return parse_iso_date(stay.entry_date), parse_iso_date(stay.exit_date)


def _checked_range(entry: str | date, exit: str | date) -> tuple[date, date]:
    start, end = parse_iso_date(entry), parse_iso_date(exit)
    if end < start:
        raise InvalidDate(f"Exit date {end.isoformat()} is before entry date {start.isoformat()}")
    return start, end


def stay_duration(entry: str | date, exit: str | date) -> int:
    """Inclusive day count: a same-day trip is 1 day."""
    start, end = _checked_range(entry, exit)
    return to_ordinal(end) - to_ordinal(start) + 1


def days_in_window(stays: Iterable, window_end: str | date) -> int:
    """Days present in [window_end - 179, window_end]. Overlapping stays are each counted."""
    end = parse_iso_date(window_end)
    start = add_days(end, -(WINDOW_DAYS - 1))
    end_ord, start_ord = to_ordinal(end), to_ordinal(start)

    total = 0
    for stay in stays:
        entry, exit_ = _bounds(stay)
        overlap = min(to_ordinal(exit_), end_ord) - max(to_ordinal(entry), start_ord) + 1
        if overlap > 0:
            total += overlap
    return total


def days_used(stays: Iterable, selector: str, as_of: str | date | None = None) -> int:
    """Days used in the window ending on as_of (default today) for a country or the zone."""
    when = today() if as_of is None else as_of
    return days_in_window(filter_stays(stays, selector), when)


def days_remaining(stays: Iterable, selector: str, as_of: str | date | None = None) -> int:
    return max(0, MAX_STAY_DAYS - days_used(stays, selector, as_of))


def find_next_entry(stays: Iterable, selector: str, after: str | date | None = None) -> NextEntry:
    """First day on or after ``after`` whose window holds fewer than 90 days.

    Probes at most NEXT_ENTRY_SEARCH_DAYS days past ``after``; when the search runs
    out the status is NEXT_ENTRY_SEARCH_EXHAUSTED and no date is given.
    """
    filtered = filter_stays(stays, selector)
    start = parse_iso_date(today() if after is None else after)
    if days_in_window(filtered, start) < MAX_STAY_DAYS:
        return NextEntry(NEXT_ENTRY_COMPLIANT_NOW, start)

    for offset in range(1, NEXT_ENTRY_SEARCH_DAYS + 1):
        candidate = add_days(start, offset)
        if days_in_window(filtered, candidate) < MAX_STAY_DAYS:
            return NextEntry(NEXT_ENTRY_FOUND, candidate)
    return NextEntry(NEXT_ENTRY_SEARCH_EXHAUSTED, None)


def next_possible_entry(stays: Iterable, selector: str, after: str | date | None = None) -> date | None:
    return find_next_entry(stays, selector, after).date


def would_overstay(
    stays: Iterable,
    selector: str,
    entry: str | date,
    exit: str | date,
) -> bool:
    """True if adding a stay over [entry, exit] puts any of its days above 90 in the window."""
    start, end = _checked_range(entry, exit)
    candidate = StayRecord(country=selector, entry_date=start, exit_date=end)
    with_candidate = filter_stays(stays, selector) + [candidate]
    return any(days_in_window(with_candidate, d) > MAX_STAY_DAYS for d in iter_days(start, end))


def _over_cap_days(filtered: Sequence):
    bounds = [_bounds(s) for s in filtered]
    first = min(entry for entry, _ in bounds)
    last = max(exit_ for _, exit_ in bounds)
    return (d for d in iter_days(first, last) if days_in_window(filtered, d) > MAX_STAY_DAYS)


def overstay_days(stays: Iterable, selector: str) -> list[date]:
    """Every day between the first entry and the last exit whose window exceeds 90 days."""
    filtered = filter_stays(stays, selector)
    if not filtered:
        return []
    return list(_over_cap_days(filtered))


def has_overstay(stays: Iterable, selector: str) -> bool:
    filtered = filter_stays(stays, selector)
    if not filtered:
        return False
    return next(_over_cap_days(filtered), None) is not None
