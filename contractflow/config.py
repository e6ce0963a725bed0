from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

# Project root (one level above the contractflow package)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = f"sqlite:///{_PROJECT_ROOT / 'contracts.db'}"

    # App
    APP_NAME: str = "ContractFlow API"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # CORS — override with env var CORS_ORIGINS as a JSON array
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    # File storage root for attachments and evidence
    UPLOADS_DIR: Path = _PROJECT_ROOT / "uploads"

    # Alert scan job
    ALERT_SCAN_ENABLED: bool = True
    ALERT_SCAN_INTERVAL_SECONDS: float = 24 * 60 * 60  # daily
    ALERT_LOOKAHEAD_DAYS: int = 7
    ALERT_DEDUPLICATE: bool = False

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
