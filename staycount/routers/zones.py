"""Static zone membership (read-only)."""
from fastapi import APIRouter, HTTPException
from staycount.schemas.compliance import ZoneResponse
from staycount.services.zones import ZONE_SCHENGEN, is_zone_selector, schengen_codes

router = APIRouter(prefix="/zones", tags=["zones"])


@router.get("/", response_model=list[ZoneResponse])
def list_zones():
    return [ZoneResponse(selector=ZONE_SCHENGEN, name="Schengen Area", countries=schengen_codes())]


@router.get("/{name}", response_model=ZoneResponse)
def get_zone(name: str):
    if name.strip().lower() != "schengen" and not is_zone_selector(name):
        raise HTTPException(status_code=404, detail="Zone not found")
    return ZoneResponse(selector=ZONE_SCHENGEN, name="Schengen Area", countries=schengen_codes())
