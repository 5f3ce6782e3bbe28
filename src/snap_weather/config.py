"""Typed settings loader for snap-weather."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openweather_api_key: str = Field(alias="OPENWEATHER_API_KEY", repr=False)
    openweather_base_url: AnyUrl = Field(
        default="https://api.openweathermap.org/data/2.5",
        alias="OPENWEATHER_BASE_URL",
    )
    openweather_icon_base_url: AnyUrl = Field(
        default="https://openweathermap.org/img/wn",
        alias="OPENWEATHER_ICON_BASE_URL",
    )
    weather_timeout_seconds: float = Field(default=30.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_country_code: str = Field(default="US", alias="WEATHER_COUNTRY_CODE")

    preferences_file: Path = Field(
        default=Path("./data/preferences.json"),
        alias="PREFERENCES_FILE",
    )
    journal_dir: Path = Field(default=Path("./data/journal"), alias="JOURNAL_DIR")
    weather_journal_enabled: bool = Field(default=True, alias="WEATHER_JOURNAL_ENABLED")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        """Accept lower-case level names from the environment."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_values(self) -> Settings:
        """Validate cross-field constraints."""
        if not self.openweather_api_key.strip():
            raise ValueError("OPENWEATHER_API_KEY must not be empty.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        code = self.weather_country_code.strip()
        if len(code) != 2 or not code.isalpha():
            raise ValueError("WEATHER_COUNTRY_CODE must be a two-letter country code.")
        self.weather_country_code = code.upper()
        return self

    @property
    def base_url(self) -> str:
        return str(self.openweather_base_url).rstrip("/")

    @property
    def icon_base_url(self) -> str:
        return str(self.openweather_icon_base_url).rstrip("/")

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for journaling (no credentials)."""
        return {
            "base_url": self.base_url,
            "icon_base_url": self.icon_base_url,
            "timeout_seconds": self.weather_timeout_seconds,
            "country_code": self.weather_country_code,
            "preferences_file": str(self.preferences_file),
            "journal_enabled": self.weather_journal_enabled,
            "log_level": self.log_level,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    settings.preferences_file.parent.mkdir(parents=True, exist_ok=True)
    if settings.weather_journal_enabled:
        settings.journal_dir.mkdir(parents=True, exist_ok=True)
    return settings
