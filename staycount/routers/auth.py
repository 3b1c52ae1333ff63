"""Traveler registration and login."""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from staycount.database import get_db
from staycount.models.user import User
from staycount.schemas.auth import Token, UserCreate, UserLogin, UserResponse
from staycount.services.auth import create_access_token, get_password_hash, verify_password
from staycount.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])

EMAIL_TAKEN_MESSAGE = "This email is already registered. Please log in instead."


def _token_for(user: User) -> Token:
    return Token(
        access_token=create_access_token(user.id, user.email),
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=Token)
def register(data: UserCreate, db: Session = Depends(get_db)):
    email = data.email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN_MESSAGE)
    user = User(
        email=email,
        hashed_password=get_password_hash(data.password),
        full_name=(data.full_name or "").strip() or None,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN_MESSAGE)
    db.refresh(user)
    return _token_for(user)


@router.post("/login", response_model=Token)
def login(data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email.strip().lower()).first()
    if not user or not verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _token_for(user)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
