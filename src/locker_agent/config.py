"""Application configuration and settings management."""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="AGENT_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Smart Locker – Agent"
    api_base_url: str = Field(
        default="http://127.0.0.1:3000",
        description="Base URL of the Smart Locker backend API (e.g., http://127.0.0.1:3000).",
    )
    catalog_timeout_seconds: float = Field(
        default=3.0,
        gt=0.0,
        description="Timeout for the optional active-resi catalog prefetch.",
    )
    request_timeout_seconds: float = Field(default=10.0, gt=0.0)
    shipment_list_limit: int = Field(default=200, ge=1, le=1000)
    port: int = Field(default=4000, ge=1, le=65535)
    log_level: str = Field(default="INFO")

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: Any) -> str:
        """Strip trailing slashes so paths can be appended directly."""
        if value is None:
            return ""
        return str(value).strip().rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> str:
        return str(value or "INFO").strip().upper()


settings = Settings()
