"""Yandex.Weather (informers endpoint) provider implementation."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import partial
from typing import Any
from urllib.parse import urlencode

from ..i18n import _ as default_translator
from .base import ErrorSink, JsonFetcher, ProviderConfig, Translator, WeatherProvider
from .conditions import resolve_condition
from .models import (
    AppletError,
    BaseMetrics,
    Condition,
    Coordinates,
    ErrorOutcome,
    HttpError,
    LocationInfo,
    WeatherData,
    Wind,
)

API_KEY_HEADER = "X-Yandex-API-Key"
DEFAULT_API_LOCALE = "en_US"

# Exact, case-sensitive system locale -> API `lang` values.
SUPPORTED_LOCALES: dict[str, str] = {
    "ru": "ru_RU",
    "ru-ru": "ru_RU",
    "ru-ua": "ru_UA",
    "uk": "uk_UA",
    "uk-ua": "uk_UA",
    "be-by": "be_BY",
    "kk-kz": "kk_KZ",
    "tr-tr": "tr_TR",
    "en-us": "en_US",
    "en": "en_US",
}

# Meteorological direction: where the wind blows from, clockwise from due north.
WIND_DEGREES: dict[str, int] = {
    "n": 0,
    "ne": 45,
    "e": 90,
    "se": 135,
    "s": 180,
    "sw": 225,
    "w": 270,
    "nw": 315,
}

# (detail, user-facing message) per `cod` in the vendor error envelope.
_ENVELOPE_ERRORS: dict[str, tuple[str, str]] = {
    "400": (
        "bad location format",
        "Please make sure Location is in the correct format in the Settings",
    ),
    "401": ("bad key", "Make sure you entered the correct key in settings"),
    "404": (
        "location not found",
        "Location not found, make sure location is available or it is in the correct format",
    ),
    "429": ("key blocked", "If this problem persists, please contact the Author of this applet"),
}
_UNKNOWN_ENVELOPE_ERROR = ("unknown", "Unknown Error, please see the logs in Looking Glass")


def resolve_locale(system_locale: str | None) -> str:
    """Map the applet locale to an API `lang` value, falling back to en_US."""
    if not system_locale:
        return DEFAULT_API_LOCALE
    return SUPPORTED_LOCALES.get(system_locale, DEFAULT_API_LOCALE)


def get_wind_degree(direction: Any) -> int:
    """Compass code to degrees; `c` (calm) and unknown codes are 0."""
    if not isinstance(direction, str):
        return 0
    return WIND_DEGREES.get(direction, 0)


def celsius_to_kelvin(value: float) -> float:
    return value + 273.15


def _block(payload: Any, key: str) -> dict[str, Any] | None:
    """Return `payload[key]` when present; a present non-object is a malformed payload."""
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    value = payload.get(key)
    if not value:
        return None
    if not isinstance(value, dict):
        raise TypeError(f"'{key}' is {type(value).__name__}, expected an object")
    return value


class YandexWeatherProvider(WeatherProvider):
    """Fetches the Yandex.Weather informers payload and normalizes it to `WeatherData`."""

    pretty_name = "Yandex.Weather"
    name = "YandexWeather"
    website = "https://yandex.com/weather"
    max_forecast_support = 8
    max_hourly_forecast_support = 48
    needs_api_key = True

    def __init__(
        self,
        config: ProviderConfig,
        fetcher: JsonFetcher,
        errors: ErrorSink,
        logger: logging.Logger,
        translate: Translator = default_translator,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.errors = errors
        self.logger = logger
        self.translate = translate

    async def get_weather(
        self,
        lat: float,
        lon: float,
        *,
        config: ProviderConfig | None = None,
    ) -> WeatherData | None:
        cfg = config or self.config
        url = self.build_query(lat, lon, cfg)
        self.logger.debug("%s request: %s", self.pretty_name, url)

        payload = await self.fetcher.load_json(
            url,
            headers=self.build_headers(cfg),
            method="GET",
            on_error=partial(self.handle_error, config=cfg),
        )
        if payload is None:
            return None
        if self.had_errors(payload, cfg):
            return None
        return self.parse_weather(payload, cfg)

    def build_query(self, lat: float, lon: float, config: ProviderConfig) -> str:
        params: dict[str, Any] = {"lat": lat, "lon": lon}
        if config.translate_condition:
            params["lang"] = resolve_locale(config.current_locale)
        return f"{config.base_url.rstrip('?')}?{urlencode(params)}"

    def build_headers(self, config: ProviderConfig) -> dict[str, str]:
        # Always sent; an empty key gets the vendor 401 envelope back.
        return {API_KEY_HEADER: config.api_key or ""}

    def handle_error(self, error: HttpError, config: ProviderConfig | None = None) -> ErrorOutcome:
        """Report HTTP 404 as a user error here; leave everything else to the host."""
        if error.code == 404:
            self.errors.show_error(
                AppletError(
                    type="soft",
                    service=(config or self.config).service_name,
                    detail="location not found",
                    message=self.translate(
                        "Location not found, make sure location is available "
                        "or it is in the correct format"
                    ),
                    user_error=True,
                )
            )
            return ErrorOutcome.SUPPRESSED
        return ErrorOutcome.PROPAGATE

    @staticmethod
    def has_returned_error(payload: Any) -> bool:
        if not isinstance(payload, dict):
            return False
        cod = payload.get("cod")
        return isinstance(cod, str) and cod != ""

    def had_errors(self, payload: Any, config: ProviderConfig) -> bool:
        """Report a vendor `{cod, message}` envelope; True when one was present."""
        if not self.has_returned_error(payload):
            return False

        cod: str = payload["cod"]
        detail, message = _ENVELOPE_ERRORS.get(cod, _UNKNOWN_ENVELOPE_ERROR)
        self.errors.show_error(
            AppletError(
                type="hard",
                service=config.service_name,
                detail=detail,
                message=self.translate(message),
            )
        )
        self.logger.debug("%s error code: %s", self.pretty_name, cod)
        self.logger.error("%s response: %s", self.pretty_name, payload.get("message"))
        return True

    def parse_weather(self, payload: Any, config: ProviderConfig) -> WeatherData | None:
        try:
            return self.parse_response(payload)
        except Exception as exc:
            self.logger.exception("%s weather parsing error: %s", self.pretty_name, exc)
            self.errors.show_error(
                AppletError(
                    type="soft",
                    service=config.service_name,
                    detail="unusual payload",
                    message=self.translate("Failed to Process Current Weather Info"),
                )
            )
            return None

    def parse_response(self, payload: Any) -> WeatherData:
        """Merge the independently parsed field groups into one snapshot."""
        base = self.parse_base_data(payload)
        fields: dict[str, Any] = base.model_dump() if base is not None else {}
        return WeatherData(
            **fields,
            coord=self.parse_coordinates(payload),
            location=self.parse_location(payload),
            wind=self.parse_wind(payload),
            condition=self.parse_condition(payload),
            forecasts=[],
            sunrise=None,
            sunset=None,
        )

    def parse_base_data(self, payload: Any) -> BaseMetrics | None:
        fact = _block(payload, "fact")
        if fact is None:
            return None

        obs_time = fact.get("obs_time")
        return BaseMetrics(
            date=datetime.fromtimestamp(obs_time, UTC) if obs_time is not None else None,
            temperature=celsius_to_kelvin(fact["temp"]),
            pressure=fact.get("pressure_pa"),
            humidity=fact.get("humidity"),
        )

    def parse_coordinates(self, payload: Any) -> Coordinates | None:
        info = _block(payload, "info")
        if info is None:
            return None
        return Coordinates(lat=info["lat"], lon=info["lon"])

    def parse_location(self, payload: Any) -> LocationInfo | None:
        info = _block(payload, "info")
        if info is None:
            return None

        tzinfo = info["tzinfo"]
        return LocationInfo(
            timezone=tzinfo["name"],
            tz_offset=tzinfo.get("offset"),
            url=info.get("url"),
        )

    def parse_wind(self, payload: Any) -> Wind | None:
        fact = _block(payload, "fact")
        if fact is None:
            return None
        return Wind(speed=fact.get("wind_speed"), degree=get_wind_degree(fact.get("wind_dir")))

    def parse_condition(self, payload: Any) -> Condition | None:
        fact = _block(payload, "fact")
        if fact is None:
            return None
        return resolve_condition(
            fact.get("condition"),
            fact.get("daytime"),
            prec_type=fact.get("prec_type"),
            phenom_condition=fact.get("phenom_condition"),
        )
