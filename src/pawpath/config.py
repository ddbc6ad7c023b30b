"""Application configuration and settings management."""

from typing import Any, Literal

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PAWPATH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "PawPath Scheduling Engine"
    api_prefix: str = "/api"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    walking_speed_mph: float = Field(default=3.0, gt=0.0, description="Average walking speed between stops.")
    pickup_service_minutes: float = Field(default=5.0, ge=0.0, description="Time spent collecting a pet.")
    dropoff_service_minutes: float = Field(default=2.0, ge=0.0, description="Time spent returning a pet.")
    default_walk_duration_minutes: float = Field(
        default=30.0,
        ge=0.0,
        description="Walk length used when a stop does not declare its own duration.",
    )
    first_weekday: Literal["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"] = Field(
        default="SUN",
        description="First day of the week used by week-view ranges.",
    )
    max_range_days: int = Field(default=366, ge=1, description="Largest date range accepted over HTTP.")
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
            # Try JSON first
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
