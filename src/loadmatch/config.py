"""Application configuration and settings management."""

from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="LOADMATCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Smart Load Matching API"
    api_prefix: str = "/api"
    postal_lookup_base_url: str = Field(
        default="https://api.zippopotam.us",
        description="Base URL of the public postal-code lookup service.",
    )
    postal_lookup_country: str = Field(
        default="us",
        description="Country segment used when querying the postal lookup service.",
    )
    postal_lookup_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Upper bound for a single postal lookup request.",
    )
    default_max_detour_miles: float = Field(
        default=50.0,
        ge=0.0,
        description="Maximum added miles for a load to be suggested when the caller gives no limit.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
