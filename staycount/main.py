"""staycount – FastAPI application for tracking the Schengen-style 90/180 rule."""
# Load .env before any app code that might read config
from dotenv import load_dotenv
from pathlib import Path
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from staycount.config import get_settings
from staycount.database import Base, engine
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from staycount.models import User, Stay  # noqa: F401
from staycount.routers import auth, stays, compliance, dashboard, zones
from staycount.services.calendar import InvalidDate

settings = get_settings()
log = logging.getLogger("uvicorn.error")
app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(stays.router)
app.include_router(compliance.router)
app.include_router(dashboard.router)
app.include_router(zones.router)


@app.exception_handler(InvalidDate)
def invalid_date_handler(request: Request, exc: InvalidDate):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.on_event("startup")
def startup():
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        log.warning("Database startup failed (tables skipped). Check DATABASE_URL. Error: %s", e)


@app.get("/")
def root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
