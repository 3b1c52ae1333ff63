"""Stay schemas."""
from datetime import date
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from staycount.services.zones import COUNTRY_MAX_LENGTH


class StayRecord(BaseModel):
    """A stay as plain data: CSV rows and what-if candidates before anything is stored."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    country: str
    entry_date: date
    exit_date: date


def _clean_country(v: str) -> str:
    v = (v or "").strip().upper()
    if not v:
        raise ValueError("Country is required")
    if len(v) > COUNTRY_MAX_LENGTH:
        raise ValueError(f"Country must be at most {COUNTRY_MAX_LENGTH} characters")
    return v


class StayCreate(BaseModel):
    country: str
    entry_date: date
    exit_date: date

    @field_validator("country")
    @classmethod
    def country_required(cls, v: str) -> str:
        return _clean_country(v)

    @model_validator(mode="after")
    def exit_on_or_after_entry(self):
        if self.exit_date < self.entry_date:
            raise ValueError("exit_date must be on or after entry_date")
        return self


class StayUpdate(BaseModel):
    country: str | None = None
    entry_date: date | None = None
    exit_date: date | None = None

    @field_validator("country")
    @classmethod
    def country_not_blank(cls, v: str | None) -> str | None:
        return None if v is None else _clean_country(v)


class StayResponse(BaseModel):
    id: str
    country: str
    entry_date: date
    exit_date: date
    duration_days: int
    is_schengen: bool


class StayImportResult(BaseModel):
    created: list[StayResponse]
    errors: list[str]
