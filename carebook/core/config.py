# carebook/core/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)


class Settings(BaseSettings):
    brand_name: str = BRAND_NAME
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database
    database_url_raw: str = Field(
        default="sqlite:///./carebook.db",
        alias="DATABASE_URL",
        description="SQLAlchemy URL for the primary database",
    )
    test_database_url: str = Field(
        default="sqlite:///:memory:",
        alias="TEST_DATABASE_URL",
        description="SQLAlchemy URL used by the test suite",
    )
    is_testing: bool = Field(default=False, alias="is_testing")

    # Scheduling
    timezone: str = Field(
        default="Asia/Kolkata",
        alias="APP_TIMEZONE",
        description="Timezone used to decide what 'today' means for scheduling rules",
    )

    # Refund policy
    refund_full_notice_hours: int = Field(
        default=24,
        ge=0,
        description="Minimum hours of notice for a full refund",
    )
    refund_late_percent: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Refund percentage when cancelling with less than full notice",
    )

    # Notifications
    notifications_enabled: bool = Field(default=True, alias="NOTIFICATIONS_ENABLED")
    email_from: str = Field(default="noreply@carebook.example", alias="EMAIL_FROM")

    # Use ConfigDict instead of Config class (Pydantic V2 style)
    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("is_testing", "notifications_enabled", mode="before")
    @classmethod
    def _coerce_bool(cls, value: object) -> bool | object:
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return value

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower() or "development"
        return value

    def get_database_url(self) -> str:
        """Get the appropriate database URL based on context."""
        if self.is_testing or is_running_tests():
            return self.test_database_url
        return self.database_url_raw


settings = Settings()
