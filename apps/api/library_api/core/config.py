"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    auth_provider: Literal["mock", "firebase"] = "firebase"
    firebase_project_id: str | None = None
    firebase_audience: str | None = None
    request_timeout_seconds: float = Field(default=10.0, gt=0)
    log_level: str = "INFO"
    temporary_admin_max_hours: int = Field(default=168, ge=1)
    reservation_loan_days: int = Field(default=14, ge=1)

    model_config = SettingsConfigDict(env_prefix="LIBRARY_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
