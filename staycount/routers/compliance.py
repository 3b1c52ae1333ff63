"""90/180 answers for one country or the Schengen zone."""
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from staycount.database import get_db
from staycount.models.user import User
from staycount.models.stay import Stay
from staycount.schemas.compliance import (
    ComplianceSummary,
    NextEntryView,
    OverstayCheckRequest,
    OverstayCheckResult,
    OverstayDaysResponse,
)
from staycount.dependencies import get_as_of, get_current_user
from staycount.services.rule_90_180 import (
    MAX_STAY_DAYS,
    WINDOW_DAYS,
    overstay_days,
    stay_duration,
    would_overstay,
)
from staycount.services.summary import CountrySummary, summarize
from staycount.services.zones import ZONE_SCHENGEN, is_zone_selector, normalize_country

router = APIRouter(prefix="/compliance", tags=["compliance"])


def _selector(raw: str) -> str:
    return ZONE_SCHENGEN if is_zone_selector(raw) else normalize_country(raw)


def summary_view(summary: CountrySummary, as_of: date) -> ComplianceSummary:
    return ComplianceSummary(
        selector=summary.selector,
        as_of=as_of,
        days_used=summary.days_used,
        days_remaining=summary.days_remaining,
        max_days=MAX_STAY_DAYS,
        window_days=WINDOW_DAYS,
        within_limit=summary.within_limit,
        has_overstay=summary.has_overstay,
        next_entry=NextEntryView(status=summary.next_entry.status, date=summary.next_entry.date),
    )


def _stays_for(db: Session, user: User) -> list[Stay]:
    return db.query(Stay).filter(Stay.user_id == user.id).all()


@router.get("/{selector}", response_model=ComplianceSummary)
def get_compliance(
    selector: str,
    as_of: date = Depends(get_as_of),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sel = _selector(selector)
    return summary_view(summarize(_stays_for(db, current_user), sel, as_of), as_of)


@router.post("/{selector}/check", response_model=OverstayCheckResult)
def check_candidate(
    selector: str,
    data: OverstayCheckRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Would a stay over these dates break the rule? Nothing is stored."""
    sel = _selector(selector)
    return OverstayCheckResult(
        selector=sel,
        entry_date=data.entry_date,
        exit_date=data.exit_date,
        duration_days=stay_duration(data.entry_date, data.exit_date),
        would_overstay=would_overstay(_stays_for(db, current_user), sel, data.entry_date, data.exit_date),
    )


@router.get("/{selector}/overstays", response_model=OverstayDaysResponse)
def get_overstays(
    selector: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    sel = _selector(selector)
    days = overstay_days(_stays_for(db, current_user), sel)
    return OverstayDaysResponse(selector=sel, has_overstay=bool(days), days=days)
