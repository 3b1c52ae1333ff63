"""Stay records: CRUD plus CSV import/export."""
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session
from staycount.config import get_settings
from staycount.database import get_db
from staycount.models.user import User
from staycount.models.stay import Stay
from staycount.schemas.stay import StayCreate, StayImportResult, StayResponse, StayUpdate
from staycount.dependencies import get_current_user
from staycount.services.calendar import today
from staycount.services.csv_codec import export_filename, parse_csv_to_stays, stays_to_csv
from staycount.services.rule_90_180 import stay_duration, would_overstay
from staycount.services.zones import ZONE_SCHENGEN, is_schengen, normalize_country

router = APIRouter(prefix="/stays", tags=["stays"])
log = logging.getLogger("uvicorn.error")

OVERSTAY_MESSAGE = "Adding this stay would exceed 90 days in at least one 180-day window."


def _stay_to_response(stay: Stay) -> StayResponse:
    return StayResponse(
        id=stay.id,
        country=stay.country,
        entry_date=stay.entry_date,
        exit_date=stay.exit_date,
        duration_days=stay_duration(stay.entry_date, stay.exit_date),
        is_schengen=is_schengen(stay.country),
    )


def _user_stays(db: Session, user: User) -> list[Stay]:
    return (
        db.query(Stay)
        .filter(Stay.user_id == user.id)
        .order_by(Stay.entry_date.asc())
        .all()
    )


def _check_overstay(existing: list[Stay], user: User, country: str, entry, exit_, force: bool) -> None:
    """409 unless forced when the stay breaks the rule for its country or, for members, the Schengen zone."""
    selectors = [country, ZONE_SCHENGEN] if is_schengen(country) else [country]
    if not any(would_overstay(existing, sel, entry, exit_) for sel in selectors):
        return
    if not force:
        raise HTTPException(status_code=409, detail=OVERSTAY_MESSAGE)
    log.warning(
        "User %s stored an overstaying stay in %s (%s to %s)",
        user.id, country, entry, exit_,
    )


def _get_own_stay(db: Session, user: User, stay_id: str) -> Stay:
    stay = db.query(Stay).filter(Stay.id == stay_id, Stay.user_id == user.id).first()
    if not stay:
        raise HTTPException(status_code=404, detail="Stay not found")
    return stay


@router.get("/", response_model=list[StayResponse])
def list_stays(
    country: str | None = Query(None, description="Exact country code, e.g. FR"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stays = _user_stays(db, current_user)
    if country:
        wanted = normalize_country(country)
        stays = [s for s in stays if s.country == wanted]
    return [_stay_to_response(s) for s in stays]


@router.post("/", response_model=StayResponse, status_code=201)
def create_stay(
    data: StayCreate,
    force: bool = Query(False, description="Store the stay even if it breaks the 90/180 rule"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _check_overstay(_user_stays(db, current_user), current_user, data.country, data.entry_date, data.exit_date, force)
    stay = Stay(
        user_id=current_user.id,
        country=data.country,
        entry_date=data.entry_date,
        exit_date=data.exit_date,
    )
    db.add(stay)
    db.commit()
    db.refresh(stay)
    return _stay_to_response(stay)


@router.get("/export")
def export_stays(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    body = stays_to_csv(_user_stays(db, current_user))
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(today())}"'},
    )


@router.post("/import", response_model=StayImportResult)
async def import_stays(
    file: UploadFile = File(..., description="CSV with country,entryDate,exitDate rows"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    settings = get_settings()
    raw = await file.read(settings.max_import_bytes + 1)
    if len(raw) > settings.max_import_bytes:
        raise HTTPException(status_code=400, detail="CSV file is too large")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")

    parsed, errors = parse_csv_to_stays(text)
    created = [
        Stay(
            user_id=current_user.id,
            country=normalize_country(record.country),
            entry_date=record.entry_date,
            exit_date=record.exit_date,
        )
        for record in parsed
    ]
    if created:
        db.add_all(created)
        db.commit()
        for stay in created:
            db.refresh(stay)
    log.info(
        "CSV import for user %s: %d stay(s) created, %d row error(s)",
        current_user.id, len(created), len(errors),
    )
    return StayImportResult(created=[_stay_to_response(s) for s in created], errors=errors)


@router.get("/{stay_id}", response_model=StayResponse)
def get_stay(
    stay_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _stay_to_response(_get_own_stay(db, current_user, stay_id))


@router.put("/{stay_id}", response_model=StayResponse)
def update_stay(
    stay_id: str,
    data: StayUpdate,
    force: bool = Query(False, description="Store the change even if it breaks the 90/180 rule"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stay = _get_own_stay(db, current_user, stay_id)
    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    entry = fields.get("entry_date", stay.entry_date)
    exit_ = fields.get("exit_date", stay.exit_date)
    if exit_ < entry:
        raise HTTPException(status_code=422, detail="exit_date must be on or after entry_date")
    country = fields.get("country", stay.country)
    others = [s for s in _user_stays(db, current_user) if s.id != stay.id]
    _check_overstay(others, current_user, country, entry, exit_, force)
    for name, value in fields.items():
        setattr(stay, name, value)
    db.add(stay)
    db.commit()
    db.refresh(stay)
    return _stay_to_response(stay)


@router.delete("/{stay_id}", status_code=204)
def delete_stay(
    stay_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    stay = _get_own_stay(db, current_user, stay_id)
    db.delete(stay)
    db.commit()
    return Response(status_code=204)
