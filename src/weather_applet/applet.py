"""Minimal applet host: owns the HTTP client and collects user-visible errors."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import Settings
from .http_client import HttpClient
from .i18n import _ as default_translator
from .weather.base import Translator, WeatherProvider
from .weather.models import AppletError, WeatherData
from .weather.yandex import YandexWeatherProvider


class WeatherApplet:
    """Runs one provider refresh at a time and keeps the errors it reported."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        *,
        translate: Translator = default_translator,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.errors: list[AppletError] = []
        self.http = HttpClient(
            errors=self,
            logger=logger,
            timeout_seconds=settings.weather_timeout_seconds,
            user_agent=settings.weather_user_agent,
            service_name=settings.weather_service_name,
            translate=translate,
            transport=transport,
        )
        self.provider: WeatherProvider = YandexWeatherProvider(
            config=settings.provider_config(),
            fetcher=self.http,
            errors=self,
            logger=logger,
            translate=translate,
        )

    async def __aenter__(self) -> WeatherApplet:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.http.aclose()

    def show_error(self, error: AppletError) -> None:
        self.errors.append(error)
        level = logging.WARNING if error.type == "soft" else logging.ERROR
        self.logger.log(
            level,
            "Applet error: %s",
            error.message,
            extra={
                "service": error.service,
                "detail": error.detail,
                "error_type": error.type,
                "user_error": error.user_error,
            },
        )

    async def refresh_weather(self, lat: float, lon: float) -> WeatherData | None:
        """Fetch one snapshot; `errors` afterwards holds only this refresh's reports."""
        self.errors = []
        weather = await self.provider.get_weather(lat, lon)
        if weather is None:
            self.logger.info("Weather refresh via %s produced no data", self.provider.pretty_name)
        return weather
