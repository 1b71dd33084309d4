"""
Application settings, loaded from environment variables and .env.
"""

from datetime import timedelta, timezone
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Process-wide settings. Per-society billing rules live in Society.settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    app_name: str = "Society Maintenance API"
    app_version: str = "1.1.0"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./society.db"
    db_echo: bool = False

    # CORS - comma-separated list
    cors_origins: str = "*"

    # Locale
    currency: str = "INR"
    timezone_offset_minutes: int = 330  # IST (UTC+5:30)

    # Seed (first run only)
    default_society_slug: str = "my-society"
    default_society_name: str = "My Society"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def local_timezone(self) -> timezone:
        return timezone(timedelta(minutes=self.timezone_offset_minutes))


settings = Settings()
