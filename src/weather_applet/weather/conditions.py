"""Yandex.Weather condition codes and the builders that turn them into `Condition`s."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import NamedTuple

from .models import Condition

DEFAULT_CUSTOM_ICON = "na-symbolic"


class ConditionCode(str, Enum):
    """Values of `fact.condition` documented for the informers endpoint."""

    CLEAR = "clear"
    PARTLY_CLOUDY = "partly-cloudy"
    CLOUDY = "cloudy"
    OVERCAST = "overcast"
    DRIZZLE = "drizzle"
    LIGHT_RAIN = "light-rain"
    RAIN = "rain"
    MODERATE_RAIN = "moderate-rain"
    HEAVY_RAIN = "heavy-rain"
    CONTINUOUS_HEAVY_RAIN = "continuous-heavy-rain"
    SHOWERS = "showers"
    WET_SNOW = "wet-snow"
    LIGHT_SNOW = "light-snow"
    SNOW = "snow"
    SNOW_SHOWERS = "snow-showers"
    HAIL = "hail"
    THUNDERSTORM = "thunderstorm"
    THUNDERSTORM_WITH_RAIN = "thunderstorm-with-rain"
    THUNDERSTORM_WITH_HAIL = "thunderstorm-with-hail"

    @classmethod
    def parse(cls, value: object) -> ConditionCode | None:
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class ConditionContext(NamedTuple):
    """Inputs a condition builder may look at besides the code itself."""

    daytime: bool
    prec_type: int | None = None
    phenom_condition: str | None = None


ConditionBuilder = Callable[[ConditionContext], Condition]


def is_daytime(value: object) -> bool:
    """Yandex marks daytime observations with `daytime == "d"`."""
    return value == "d"


def _builder(
    main: str,
    description: str,
    *,
    day: list[str],
    night: list[str],
    generic: list[str],
    custom_day: str,
    custom_night: str | None = None,
) -> ConditionBuilder:
    """Make a builder that picks day or night icons and appends the generic fallbacks."""

    def build(ctx: ConditionContext) -> Condition:
        specific = day if ctx.daytime else night
        custom = custom_day if ctx.daytime or custom_night is None else custom_night
        return Condition(
            main=main,
            description=description,
            icons=[*specific, *generic],
            custom_icon=custom,
        )

    return build


def _unknown(ctx: ConditionContext) -> Condition:
    return Condition(
        main="Unknown",
        description="Unknown",
        icons=["weather-clear"],
        custom_icon=DEFAULT_CUSTOM_ICON,
    )


CONDITION_BUILDERS: dict[ConditionCode, ConditionBuilder] = {
    ConditionCode.CLEAR: _builder(
        "Clear", "Clear",
        day=["weather-clear"], night=["weather-clear-night"], generic=[],
        custom_day="day-sunny-symbolic", custom_night="night-clear-symbolic",
    ),
    ConditionCode.PARTLY_CLOUDY: _builder(
        "Clouds", "Partly cloudy",
        day=["weather-few-clouds"], night=["weather-few-clouds-night"],
        generic=["weather-clouds"],
        custom_day="day-cloudy-symbolic", custom_night="night-alt-cloudy-symbolic",
    ),
    ConditionCode.CLOUDY: _builder(
        "Clouds", "Cloudy",
        day=["weather-clouds"], night=["weather-clouds-night"],
        generic=["weather-overcast"],
        custom_day="cloud-symbolic",
    ),
    ConditionCode.OVERCAST: _builder(
        "Clouds", "Overcast",
        day=["weather-overcast", "weather-clouds"],
        night=["weather-overcast", "weather-clouds-night"],
        generic=["weather-many-clouds"],
        custom_day="cloudy-symbolic",
    ),
    ConditionCode.DRIZZLE: _builder(
        "Drizzle", "Drizzle",
        day=["weather-showers-scattered-day"], night=["weather-showers-scattered-night"],
        generic=["weather-showers-scattered", "weather-rain"],
        custom_day="day-sprinkle-symbolic", custom_night="night-alt-sprinkle-symbolic",
    ),
    ConditionCode.LIGHT_RAIN: _builder(
        "Rain", "Light rain",
        day=["weather-showers-scattered-day"], night=["weather-showers-scattered-night"],
        generic=["weather-showers-scattered", "weather-rain"],
        custom_day="day-rain-symbolic", custom_night="night-alt-rain-symbolic",
    ),
    ConditionCode.RAIN: _builder(
        "Rain", "Rain",
        day=["weather-showers-day"], night=["weather-showers-night"],
        generic=["weather-showers", "weather-rain"],
        custom_day="rain-symbolic",
    ),
    ConditionCode.MODERATE_RAIN: _builder(
        "Rain", "Moderate rain",
        day=["weather-showers-day"], night=["weather-showers-night"],
        generic=["weather-showers", "weather-rain"],
        custom_day="rain-symbolic",
    ),
    ConditionCode.HEAVY_RAIN: _builder(
        "Rain", "Heavy rain",
        day=["weather-showers-day"], night=["weather-showers-night"],
        generic=["weather-showers", "weather-rain"],
        custom_day="rain-wind-symbolic",
    ),
    ConditionCode.CONTINUOUS_HEAVY_RAIN: _builder(
        "Rain", "Continuous heavy rain",
        day=["weather-showers-day"], night=["weather-showers-night"],
        generic=["weather-showers", "weather-rain"],
        custom_day="rain-wind-symbolic",
    ),
    ConditionCode.SHOWERS: _builder(
        "Showers", "Showers",
        day=["weather-showers-day"], night=["weather-showers-night"],
        generic=["weather-showers"],
        custom_day="day-showers-symbolic", custom_night="night-alt-showers-symbolic",
    ),
    ConditionCode.WET_SNOW: _builder(
        "Sleet", "Sleet",
        day=["weather-freezing-rain-day"], night=["weather-freezing-rain-night"],
        generic=["weather-freezing-rain", "weather-snow-rain"],
        custom_day="day-sleet-symbolic", custom_night="night-alt-sleet-symbolic",
    ),
    ConditionCode.LIGHT_SNOW: _builder(
        "Snow", "Light snow",
        day=["weather-snow-scattered-day"], night=["weather-snow-scattered-night"],
        generic=["weather-snow-scattered", "weather-snow"],
        custom_day="day-snow-symbolic", custom_night="night-alt-snow-symbolic",
    ),
    ConditionCode.SNOW: _builder(
        "Snow", "Snow",
        day=["weather-snow-day"], night=["weather-snow-night"],
        generic=["weather-snow"],
        custom_day="snow-symbolic",
    ),
    ConditionCode.SNOW_SHOWERS: _builder(
        "Snow", "Snowfall",
        day=["weather-snow-day"], night=["weather-snow-night"],
        generic=["weather-snow"],
        custom_day="snow-wind-symbolic",
    ),
    ConditionCode.HAIL: _builder(
        "Hail", "Hail",
        day=["weather-freezing-rain-day"], night=["weather-freezing-rain-night"],
        generic=["weather-freezing-rain", "weather-snow-rain"],
        custom_day="day-hail-symbolic", custom_night="night-alt-hail-symbolic",
    ),
    ConditionCode.THUNDERSTORM: _builder(
        "Thunderstorm", "Thunderstorm",
        day=["weather-storm-day"], night=["weather-storm-night"],
        generic=["weather-storm"],
        custom_day="day-thunderstorm-symbolic", custom_night="night-alt-thunderstorm-symbolic",
    ),
    ConditionCode.THUNDERSTORM_WITH_RAIN: _builder(
        "Thunderstorm", "Rain, thunderstorm",
        day=["weather-storm-day"], night=["weather-storm-night"],
        generic=["weather-storm", "weather-showers"],
        custom_day="day-storm-showers-symbolic", custom_night="night-alt-storm-showers-symbolic",
    ),
    ConditionCode.THUNDERSTORM_WITH_HAIL: _builder(
        "Thunderstorm", "Thunderstorm, hail",
        day=["weather-storm-day"], night=["weather-storm-night"],
        generic=["weather-storm", "weather-freezing-rain"],
        custom_day="day-sleet-storm-symbolic", custom_night="night-alt-sleet-storm-symbolic",
    ),
}


def resolve_condition(
    code: object,
    daytime: object,
    prec_type: int | None = None,
    phenom_condition: str | None = None,
) -> Condition:
    """Build the `Condition` for a vendor code; unknown codes fall through to `Unknown`."""
    ctx = ConditionContext(
        daytime=is_daytime(daytime),
        prec_type=prec_type,
        phenom_condition=phenom_condition,
    )
    parsed = ConditionCode.parse(code)
    if parsed is None:
        return _unknown(ctx)
    return CONDITION_BUILDERS[parsed](ctx)
