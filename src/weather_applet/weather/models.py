"""Typed models for the applet's shared weather data and error records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

ErrorSeverity = Literal["soft", "hard"]


class Coordinates(BaseModel):
    """Coordinates the vendor resolved the request to."""

    lat: float
    lon: float


class LocationInfo(BaseModel):
    """Location metadata for a weather snapshot."""

    timezone: str | None = None
    tz_offset: int | None = None
    url: str | None = None


class Wind(BaseModel):
    """Wind speed and meteorological direction (degrees clockwise from north)."""

    speed: float | None = None
    degree: int = Field(default=0, ge=0, le=359)


class Condition(BaseModel):
    """Sky/precipitation state resolved from a vendor condition code."""

    main: str
    description: str
    icons: list[str] = Field(default_factory=list)
    custom_icon: str


class BaseMetrics(BaseModel):
    """Observation time and scalar metrics taken from the vendor `fact` block."""

    date: datetime | None = None
    temperature: float | None = None
    pressure: float | None = None
    humidity: float | None = None


class WeatherData(BaseModel):
    """Normalized provider snapshot handed to the applet."""

    date: datetime | None = None
    temperature: float | None = None
    pressure: float | None = None
    humidity: float | None = None
    coord: Coordinates | None = None
    location: LocationInfo | None = None
    wind: Wind | None = None
    condition: Condition | None = None
    # Forecasts and sun times are not provided by the informers endpoint.
    forecasts: list[dict[str, Any]] = Field(default_factory=list)
    sunrise: datetime | None = None
    sunset: datetime | None = None


class AppletError(BaseModel):
    """Structured error record passed to the host's error sink."""

    type: ErrorSeverity
    detail: str
    message: str
    service: str | None = None
    user_error: bool = False


class HttpError(BaseModel):
    """Failure raised by the host fetch layer before any JSON reached the provider."""

    code: int
    message: str
    reason_phrase: str | None = None
    url: str | None = None
    data: Any = None


class ErrorOutcome(str, Enum):
    """What a provider's HTTP error handler wants the host to do next."""

    PROPAGATE = "propagate"
    SUPPRESSED = "suppressed"
