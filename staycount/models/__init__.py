"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table; no migration scripts needed for fresh installs.
"""
from staycount.models.user import User
from staycount.models.stay import Stay

__all__ = [
    "User",
    "Stay",
]
