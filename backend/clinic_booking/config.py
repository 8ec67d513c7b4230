# backend/clinic_booking/config.py

from functools import cached_property
from pathlib import Path

import pytz
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repository root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/clinic_booking.db"
    redis_url: str | None = None

    clinic_timezone: str = "Asia/Tokyo"
    schedule_cache_ttl_seconds: int = 86400
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative SQLite paths are anchored at the repository root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            return f"sqlite:///{absolute_path}"
        return url

    @cached_property
    def tz(self):
        return pytz.timezone(self.clinic_timezone)


settings = Settings()
