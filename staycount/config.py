"""Application configuration from environment."""
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

# Load .env from project root (parent of staycount/) so env vars are available everywhere
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


class Settings(BaseSettings):
    app_name: str = "staycount"
    app_env: str = "development"
    debug: bool = True

    database_url: str = "sqlite:///./staycount.db"

    jwt_secret_key: str = "jwt-secret-change-me"
    jwt_algorithm: str = "HS256"

    @field_validator("jwt_secret_key")
    @classmethod
    def strip_jwt_secret(cls, v: str) -> str:
        return (v or "").strip()

    jwt_access_token_expire_minutes: int = 60

    cors_allow_origins: list[str] = ["*"]

    # Days in the dashboard range (end included) when the caller gives no start date
    dashboard_default_range_days: int = 180
    # Upper bound for CSV uploads
    max_import_bytes: int = 1024 * 1024

    class Config:
        env_file = str(_env_path)
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
