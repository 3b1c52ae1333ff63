"""Recorded trips: one row per entry/exit pair in a country."""
import uuid

from sqlalchemy import Column, Integer, String, Date, ForeignKey, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from staycount.database import Base
from staycount.services.zones import COUNTRY_MAX_LENGTH


def _new_stay_id() -> str:
    return uuid.uuid4().hex


class Stay(Base):
    __tablename__ = "stays"
    __table_args__ = (CheckConstraint("exit_date >= entry_date", name="ck_stays_exit_after_entry"),)

    id = Column(String(32), primary_key=True, default=_new_stay_id)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # ISO 3166-1 alpha-2, stored trimmed and upper-cased
    country = Column(String(COUNTRY_MAX_LENGTH), nullable=False, index=True)
    entry_date = Column(Date, nullable=False)
    exit_date = Column(Date, nullable=False)

    user = relationship("User", back_populates="stays")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
