"""Typed settings loader for the weather applet."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AnyHttpUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .weather.base import ProviderConfig

YANDEX_INFORMERS_URL = "https://api.weather.yandex.ru/v2/informers"


class Settings(BaseSettings):
    """Applet settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    yandex_api_key: str = Field(default="", alias="YANDEX_API_KEY", repr=False)
    yandex_base_url: AnyHttpUrl = Field(
        default=YANDEX_INFORMERS_URL,
        alias="YANDEX_BASE_URL",
        validate_default=True,
    )
    applet_locale: str | None = Field(default="en", alias="APPLET_LOCALE")
    translate_condition: bool = Field(default=True, alias="TRANSLATE_CONDITION")
    weather_service_name: str | None = Field(
        default="yandexweather",
        alias="WEATHER_SERVICE_NAME",
    )

    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    weather_user_agent: str = Field(
        default="weather-applet/0.1 (+https://yandex.com/weather)",
        alias="WEATHER_USER_AGENT",
    )
    weather_default_lat: float | None = Field(default=None, alias="WEATHER_DEFAULT_LAT")
    weather_default_lon: float | None = Field(default=None, alias="WEATHER_DEFAULT_LON")

    journal_dir: Path = Field(default=Path("./data/journal"), alias="JOURNAL_DIR")
    weather_snapshot_dir: Path = Field(
        default=Path("./data/snapshots"),
        alias="WEATHER_SNAPSHOT_DIR",
    )
    weather_journal_snapshot_files: bool = Field(
        default=False,
        alias="WEATHER_JOURNAL_SNAPSHOT_FILES",
    )

    @field_validator(
        "weather_default_lat",
        "weather_default_lon",
        "applet_locale",
        "weather_service_name",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as unset."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.weather_default_lat is not None and not (-90 <= self.weather_default_lat <= 90):
            raise ValueError("WEATHER_DEFAULT_LAT must be between -90 and 90.")
        if self.weather_default_lon is not None and not (
            -180 <= self.weather_default_lon <= 180
        ):
            raise ValueError("WEATHER_DEFAULT_LON must be between -180 and 180.")
        return self

    def provider_config(self) -> ProviderConfig:
        """Project the settings onto what a provider adapter reads."""
        return ProviderConfig(
            api_key=self.yandex_api_key,
            current_locale=self.applet_locale,
            translate_condition=self.translate_condition,
            service_name=self.weather_service_name,
            base_url=str(self.yandex_base_url),
        )

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for journaling (no credentials)."""
        return {
            "base_url": str(self.yandex_base_url),
            "api_key_configured": bool(self.yandex_api_key),
            "locale": self.applet_locale,
            "translate_condition": self.translate_condition,
            "service_name": self.weather_service_name,
            "timeout_seconds": self.weather_timeout_seconds,
            "snapshot_files": self.weather_journal_snapshot_files,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc

    settings.journal_dir.mkdir(parents=True, exist_ok=True)
    settings.weather_snapshot_dir.mkdir(parents=True, exist_ok=True)
    return settings
