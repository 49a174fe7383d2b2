"""Weather provider integrations."""

from .base import ErrorSink, JsonFetcher, ProviderConfig, WeatherProvider
from .conditions import ConditionCode, resolve_condition
from .models import AppletError, Condition, ErrorOutcome, HttpError, WeatherData
from .yandex import YandexWeatherProvider

__all__ = [
    "AppletError",
    "Condition",
    "ConditionCode",
    "ErrorOutcome",
    "ErrorSink",
    "HttpError",
    "JsonFetcher",
    "ProviderConfig",
    "WeatherData",
    "WeatherProvider",
    "YandexWeatherProvider",
    "resolve_condition",
]
