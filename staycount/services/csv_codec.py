"""CSV import/export of stays.

Format: ``country,entryDate,exitDate`` with ISO dates, optional header line.
Cells are split on bare commas; quoting is not supported.
"""
from __future__ import annotations

import re
import uuid
from datetime import date
from typing import Iterable, NamedTuple

from staycount.schemas.stay import StayRecord
from staycount.services.calendar import format_iso_date, is_valid_iso_date, parse_iso_date
from staycount.services.zones import COUNTRY_MAX_LENGTH

CSV_HEADER = "country,entryDate,exitDate"
_LINE_SPLIT_RE = re.compile(r"\r?\n")


class RowValidationError(ValueError):
    """One CSV row is unusable. Caught per row; never escapes parse_csv_to_stays."""

    def __init__(self, row_number: int, reason: str):
        self.row_number = row_number
        self.reason = reason
        super().__init__(f"Row {row_number}: {reason}")


class CsvImportResult(NamedTuple):
    stays: list[StayRecord]
    errors: list[str]


def _iso(value) -> str:
    return format_iso_date(parse_iso_date(value))


def stays_to_csv(stays: Iterable) -> str:
    """Header plus one line per stay, in the order given."""
    lines = [CSV_HEADER]
    lines.extend(f"{s.country},{_iso(s.entry_date)},{_iso(s.exit_date)}" for s in stays)
    return "\n".join(lines)


def _parse_row(row: str, row_number: int) -> StayRecord:
    cells = [c.strip() for c in row.split(",")]
    if len(cells) != 3:
        raise RowValidationError(row_number, "expected 3 columns (country, entryDate, exitDate)")
    country, entry_raw, exit_raw = cells
    if not country:
        raise RowValidationError(row_number, "country is empty")
    if len(country) > COUNTRY_MAX_LENGTH:
        raise RowValidationError(row_number, f"country must be at most {COUNTRY_MAX_LENGTH} characters")
    if not is_valid_iso_date(entry_raw):
        raise RowValidationError(row_number, f'invalid entryDate "{entry_raw}"')
    if not is_valid_iso_date(exit_raw):
        raise RowValidationError(row_number, f'invalid exitDate "{exit_raw}"')
    entry, exit_ = parse_iso_date(entry_raw), parse_iso_date(exit_raw)
    if exit_ < entry:
        raise RowValidationError(row_number, "exitDate must be on or after entryDate")
    return StayRecord(id=uuid.uuid4().hex, country=country, entry_date=entry, exit_date=exit_)


def parse_csv_to_stays(text: str) -> CsvImportResult:
    """Parse CSV text into stays. Bad rows are reported in ``errors`` and skipped.

    Row numbers count non-blank lines from 1, header included.
    """
    lines = [line for line in _LINE_SPLIT_RE.split(text or "") if line.strip()]
    start = 1 if lines and lines[0].strip().lower().startswith("country") else 0

    stays: list[StayRecord] = []
    errors: list[str] = []
    for index in range(start, len(lines)):
        try:
            stays.append(_parse_row(lines[index], index + 1))
        except RowValidationError as e:
            errors.append(str(e))
    return CsvImportResult(stays, errors)


def export_filename(as_of: date) -> str:
    return f"stays-90-180-{format_iso_date(as_of)}.csv"
