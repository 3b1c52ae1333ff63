"""Per-country and per-month travel summaries for the dashboard."""
from __future__ import annotations

from datetime import date
from typing import Iterable, NamedTuple

from staycount.services.calendar import add_days, parse_iso_date, to_ordinal
from staycount.services.rule_90_180 import (
    MAX_STAY_DAYS,
    NextEntry,
    days_in_window,
    find_next_entry,
    has_overstay,
)
from staycount.services.zones import filter_stays, is_schengen, normalize_country


class CountrySummary(NamedTuple):
    selector: str
    days_used: int
    days_remaining: int
    next_entry: NextEntry
    has_overstay: bool
    within_limit: bool


class CountryDays(NamedTuple):
    country: str
    days: int
    is_schengen: bool


class MonthDays(NamedTuple):
    month: str  # YYYY-MM
    days: int


def summarize(stays: Iterable, selector: str, as_of: date) -> CountrySummary:
    stays = list(stays)
    used = days_in_window(filter_stays(stays, selector), as_of)
    return CountrySummary(
        selector=selector,
        days_used=used,
        days_remaining=max(0, MAX_STAY_DAYS - used),
        next_entry=find_next_entry(stays, selector, as_of),
        has_overstay=has_overstay(stays, selector),
        within_limit=used < MAX_STAY_DAYS,
    )


def country_codes(stays: Iterable) -> list[str]:
    return sorted({normalize_country(s.country) for s in stays})


def has_zone_stays(stays: Iterable) -> bool:
    return any(is_schengen(s.country) for s in stays)


def _clamped_days(stay, start: date, end: date) -> int:
    entry, exit_ = parse_iso_date(stay.entry_date), parse_iso_date(stay.exit_date)
    return max(0, to_ordinal(min(exit_, end)) - to_ordinal(max(entry, start)) + 1)


def stays_in_range(stays: Iterable, start: date, end: date) -> list:
    """Stays with at least one day inside [start, end]."""
    return [s for s in stays if _clamped_days(s, start, end) > 0]


def days_per_country(stays: Iterable, start: date, end: date) -> list[CountryDays]:
    """Days in [start, end] per country, most-visited first."""
    totals: dict[str, int] = {}
    for stay in stays_in_range(stays, start, end):
        code = normalize_country(stay.country)
        totals[code] = totals.get(code, 0) + _clamped_days(stay, start, end)
    rows = [CountryDays(code, days, is_schengen(code)) for code, days in totals.items()]
    return sorted(rows, key=lambda r: (-r.days, r.country))


def _month_bounds(start: date, end: date):
    first = start.replace(day=1)
    while first <= end:
        # day 28 + 4 always lands in the following month
        next_first = add_days(first.replace(day=28), 4).replace(day=1)
        yield first, add_days(next_first, -1)
        first = next_first


def monthly_timeline(stays: Iterable, start: date, end: date) -> list[MonthDays]:
    """Days abroad in each calendar month touched by [start, end] (whole months)."""
    stays = list(stays)
    out: list[MonthDays] = []
    for month_start, month_end in _month_bounds(start, end):
        total = sum(_clamped_days(s, month_start, month_end) for s in stays)
        out.append(MonthDays(month_start.strftime("%Y-%m"), total))
    return out
