"""Shared dependencies: DB session, current user, reference date."""
from datetime import date
from fastapi import Depends, HTTPException, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from staycount.database import get_db
from staycount.models.user import User
from staycount.services.auth import decode_token_with_error
from staycount.services.calendar import today

security = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    token_str = (credentials.credentials or "").strip()
    payload, _ = decode_token_with_error(token_str)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_as_of(
    as_of: date | None = Query(None, description="Reference day (YYYY-MM-DD); defaults to today"),
) -> date:
    """The 'today' every compliance answer is computed against."""
    return as_of or today()
