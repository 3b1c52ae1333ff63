"""Schengen membership and the combined-zone selector."""
from __future__ import annotations

from typing import Iterable, TypeVar

# Schengen Area member states, ISO 3166-1 alpha-2 (29 states as of 2025)
SCHENGEN_CODES = frozenset({
    "AT",  # Austria
    "BE",  # Belgium
    "BG",  # Bulgaria
    "HR",  # Croatia
    "CZ",  # Czech Republic
    "DK",  # Denmark
    "EE",  # Estonia
    "FI",  # Finland
    "FR",  # France
    "DE",  # Germany
    "GR",  # Greece
    "HU",  # Hungary
    "IS",  # Iceland
    "IT",  # Italy
    "LV",  # Latvia
    "LI",  # Liechtenstein
    "LT",  # Lithuania
    "LU",  # Luxembourg
    "MT",  # Malta
    "NL",  # Netherlands
    "NO",  # Norway
    "PL",  # Poland
    "PT",  # Portugal
    "RO",  # Romania
    "SK",  # Slovakia
    "SI",  # Slovenia
    "ES",  # Spain
    "SE",  # Sweden
    "CH",  # Switzerland
})

# Longest country identifier the stays table holds
COUNTRY_MAX_LENGTH = 8

# Selector meaning "all Schengen stays, one allowance"; never a real country code
ZONE_SCHENGEN = "__schengen__"

T = TypeVar("T")


def normalize_country(value: str | None) -> str:
    return (value or "").strip().upper()


def is_zone_selector(selector: str | None) -> bool:
    return (selector or "").strip().lower() == ZONE_SCHENGEN


def is_schengen(country: str | None) -> bool:
    return normalize_country(country) in SCHENGEN_CODES


is_member = is_schengen


def schengen_codes() -> list[str]:
    return sorted(SCHENGEN_CODES)


def filter_stays(stays: Iterable[T], selector: str) -> list[T]:
    """Stays counted against selector: every member stay for the zone, else exact country matches."""
    if is_zone_selector(selector):
        return [s for s in stays if is_schengen(s.country)]
    wanted = normalize_country(selector)
    return [s for s in stays if normalize_country(s.country) == wanted]
