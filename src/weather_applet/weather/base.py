"""Provider-agnostic weather interface and the host capabilities providers consume."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Protocol

from pydantic import BaseModel

from .models import AppletError, ErrorOutcome, HttpError, WeatherData

HttpErrorHandler = Callable[[HttpError], ErrorOutcome]
Translator = Callable[[str], str]


class JsonFetcher(Protocol):
    """Asynchronous JSON GET supplied by the host."""

    async def load_json(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        method: str = "GET",
        on_error: HttpErrorHandler | None = None,
    ) -> Any:
        """Return decoded JSON, or None after the failure has been dealt with."""
        ...


class ErrorSink(Protocol):
    """User-visible error reporting supplied by the host."""

    def show_error(self, error: AppletError) -> None: ...


class ProviderConfig(BaseModel):
    """Slice of applet configuration a provider reads on every request."""

    api_key: str = ""
    current_locale: str | None = None
    translate_condition: bool = False
    service_name: str | None = None
    base_url: str


class WeatherProvider(ABC):
    """Base contract for weather providers used by the applet."""

    pretty_name: str
    name: str
    website: str
    max_forecast_support: int
    max_hourly_forecast_support: int
    needs_api_key: bool

    @abstractmethod
    async def get_weather(
        self,
        lat: float,
        lon: float,
        *,
        config: ProviderConfig | None = None,
    ) -> WeatherData | None:
        """Fetch and normalize current weather, or return None after reporting a failure."""
