"""Application settings.

Environment Variables:
- PAYMINDER_DB_PATH: SQLite file for the key-value store (default: ~/.payminder/payminder.db)
- PAYMINDER_LOG_LEVEL: Logging level (default: WARNING)
- PAYMINDER_JSON_LOGS: Emit JSON log lines (default: false)
- PAYMINDER_REMINDER_INTERVAL_MINUTES: Minutes between reminder ticks (default: 5)
- PAYMINDER_DUE_SOON_DAYS: Days ahead that count as "due soon" (default: 3)
- PAYMINDER_FEED_MAX_AGE_HOURS: Age after which non-persistent notifications are dropped (default: 24)
- PAYMINDER_FEED_MAX_ENTRIES: Maximum notifications kept in the feed (default: 100)
- PAYMINDER_AUTO_DISMISS_SECONDS: Seconds before a native notification is closed (default: 10)
"""

from datetime import timedelta
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """payminder configuration.

    All settings can be overridden via environment variables with the
    PAYMINDER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYMINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    db_path: Optional[str] = Field(
        default=None,
        description="SQLite database path; None uses ~/.payminder/payminder.db",
    )

    log_level: str = Field(default="WARNING", description="Logging level")

    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    reminder_interval_minutes: int = Field(
        default=5,
        ge=1,
        le=24 * 60,
        description="Minutes between reminder ticks",
    )

    due_soon_days: int = Field(
        default=3,
        ge=0,
        le=30,
        description="Days ahead (inclusive) classified as due soon",
    )

    feed_max_age_hours: int = Field(
        default=24,
        ge=1,
        description="Age after which non-persistent notifications are pruned",
    )

    feed_max_entries: int = Field(
        default=100,
        ge=1,
        description="Maximum notifications kept in the in-app feed",
    )

    auto_dismiss_seconds: int = Field(
        default=10,
        ge=0,
        description="Seconds before a native notification is closed (0 keeps it open)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the logging level name."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got {v}")
        return v.upper()

    @property
    def database_path(self) -> Path:
        """SQLite file of the store, ~/.payminder/payminder.db unless db_path is set."""
        if self.db_path:
            return Path(self.db_path).expanduser()
        return Path.home() / ".payminder" / "payminder.db"

    @property
    def reminder_interval(self) -> timedelta:
        return timedelta(minutes=self.reminder_interval_minutes)

    @property
    def feed_max_age(self) -> timedelta:
        return timedelta(hours=self.feed_max_age_hours)

    @property
    def auto_dismiss(self) -> timedelta:
        return timedelta(seconds=self.auto_dismiss_seconds)
