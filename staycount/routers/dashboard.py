"""Travel overview: every country with stays, the Schengen total, and range charts."""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from staycount.config import get_settings
from staycount.database import get_db
from staycount.models.user import User
from staycount.models.stay import Stay
from staycount.schemas.compliance import CountryDaysView, DashboardResponse, MonthDaysView
from staycount.dependencies import get_current_user
from staycount.routers.compliance import summary_view
from staycount.services.calendar import add_days, today
from staycount.services.summary import (
    country_codes,
    days_per_country,
    has_zone_stays,
    monthly_timeline,
    summarize,
)
from staycount.services.zones import ZONE_SCHENGEN, normalize_country

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=DashboardResponse)
def dashboard(
    start: date | None = Query(None, description="Range start; defaults to the configured number of days ending at end"),
    end: date | None = Query(None, description="Range end and 'as of' day; defaults to today"),
    country: str | None = Query(None, description="Only summarize this country"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    end = end or today()
    start = start or add_days(end, -(get_settings().dashboard_default_range_days - 1))
    if end < start:
        raise HTTPException(status_code=422, detail="end must be on or after start")

    stays = db.query(Stay).filter(Stay.user_id == current_user.id).all()
    codes = [normalize_country(country)] if country else country_codes(stays)
    schengen = summary_view(summarize(stays, ZONE_SCHENGEN, end), end) if has_zone_stays(stays) else None

    return DashboardResponse(
        start=start,
        end=end,
        countries=[summary_view(summarize(stays, code, end), end) for code in codes],
        schengen=schengen,
        days_per_country=[CountryDaysView(**row._asdict()) for row in days_per_country(stays, start, end)],
        monthly_timeline=[MonthDaysView(**row._asdict()) for row in monthly_timeline(stays, start, end)],
    )
