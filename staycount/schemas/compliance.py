"""90/180 compliance and dashboard schemas."""
import datetime
from datetime import date
from pydantic import BaseModel, model_validator


class NextEntryView(BaseModel):
    status: str  # "compliant_now" | "found" | "search_exhausted"
    date: datetime.date | None = None


class ComplianceSummary(BaseModel):
    selector: str
    as_of: date
    days_used: int
    days_remaining: int
    max_days: int
    window_days: int
    within_limit: bool
    has_overstay: bool
    next_entry: NextEntryView


class OverstayCheckRequest(BaseModel):
    entry_date: date
    exit_date: date

    @model_validator(mode="after")
    def exit_on_or_after_entry(self):
        if self.exit_date < self.entry_date:
            raise ValueError("exit_date must be on or after entry_date")
        return self


class OverstayCheckResult(BaseModel):
    selector: str
    entry_date: date
    exit_date: date
    duration_days: int
    would_overstay: bool


class OverstayDaysResponse(BaseModel):
    selector: str
    has_overstay: bool
    days: list[date]


class CountryDaysView(BaseModel):
    country: str
    days: int
    is_schengen: bool


class MonthDaysView(BaseModel):
    month: str
    days: int


class DashboardResponse(BaseModel):
    start: date
    end: date
    countries: list[ComplianceSummary]
    schengen: ComplianceSummary | None = None
    days_per_country: list[CountryDaysView]
    monthly_timeline: list[MonthDaysView]


class ZoneResponse(BaseModel):
    selector: str
    name: str
    countries: list[str]
