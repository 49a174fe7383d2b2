"""CLI: fetch one Yandex.Weather snapshot, journal it, and print a summary."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import uuid

from rich.console import Console
from rich.table import Table

from .applet import WeatherApplet
from .config import Settings, load_settings
from .exceptions import ConfigError, JournalError, WeatherProviderError
from .journal import JournalWriter
from .log_setup import setup_logger
from .weather.models import AppletError, WeatherData


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch and journal a Yandex.Weather current conditions snapshot."
    )
    parser.add_argument("--lat", type=float, default=None, help="Latitude.")
    parser.add_argument("--lon", type=float, default=None, help="Longitude.")
    parser.add_argument(
        "--locale",
        type=str,
        default=None,
        help="Applet locale used for condition translation (e.g. ru, uk-ua).",
    )
    parser.add_argument(
        "--no-translate",
        action="store_true",
        help="Do not request translated condition text.",
    )
    return parser.parse_args(argv)


def _validate_cli_input(args: argparse.Namespace, settings: Settings) -> tuple[float, float]:
    lat = args.lat if args.lat is not None else settings.weather_default_lat
    lon = args.lon if args.lon is not None else settings.weather_default_lon

    if lat is None or lon is None:
        raise WeatherProviderError(
            "Missing location input: pass --lat and --lon or set WEATHER_DEFAULT_LAT/LON."
        )
    if not (-90 <= lat <= 90):
        raise WeatherProviderError(f"Invalid latitude {lat}; expected between -90 and 90.")
    if not (-180 <= lon <= 180):
        raise WeatherProviderError(f"Invalid longitude {lon}; expected between -180 and 180.")
    return lat, lon


def _apply_overrides(args: argparse.Namespace, settings: Settings) -> Settings:
    update: dict[str, object] = {}
    if args.locale is not None:
        update["applet_locale"] = args.locale
    if args.no_translate:
        update["translate_condition"] = False
    return settings.model_copy(update=update) if update else settings


def _fmt(value: object, suffix: str = "") -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:g}{suffix}"
    return f"{value}{suffix}"


def _print_snapshot_summary(console: Console, weather: WeatherData) -> None:
    table = Table(title="Yandex.Weather Current Conditions")
    table.add_column("Field")
    table.add_column("Value", overflow="fold")

    celsius = weather.temperature - 273.15 if weather.temperature is not None else None
    table.add_row("Observed (UTC)", weather.date.isoformat() if weather.date else "-")
    table.add_row("Temperature", f"{_fmt(weather.temperature, ' K')} / {_fmt(celsius, ' °C')}")
    table.add_row("Pressure", _fmt(weather.pressure))
    table.add_row("Humidity", _fmt(weather.humidity, " %"))
    if weather.wind is not None:
        table.add_row("Wind", f"{_fmt(weather.wind.speed, ' m/s')} from {weather.wind.degree}°")
    if weather.condition is not None:
        table.add_row("Condition", f"{weather.condition.main} ({weather.condition.description})")
        table.add_row("Icons", ", ".join(weather.condition.icons) or "-")
    if weather.coord is not None:
        table.add_row("Coordinates", f"{weather.coord.lat:.4f}, {weather.coord.lon:.4f}")
    if weather.location is not None:
        table.add_row(
            "Timezone",
            f"{weather.location.timezone or '-'} (offset {_fmt(weather.location.tz_offset)} s)",
        )
        table.add_row("More info", weather.location.url or "-")
    console.print(table)


def _print_errors(console: Console, errors: list[AppletError]) -> None:
    for error in errors:
        style = "yellow" if error.type == "soft" else "red"
        console.print(f"[{style}]{error.type} error[/] ({error.detail}): {error.message}")


async def _refresh(
    settings: Settings, lat: float, lon: float, logger: logging.Logger
) -> tuple[WeatherData | None, list[AppletError]]:
    async with WeatherApplet(settings=settings, logger=logger) as applet:
        weather = await applet.refresh_weather(lat, lon)
        return weather, list(applet.errors)


def main(argv: list[str] | None = None) -> int:
    """Run one weather refresh."""
    args = parse_args(argv)
    session_id = uuid.uuid4().hex[:12]
    logger = setup_logger(session_id=session_id)
    console = Console()

    try:
        settings = _apply_overrides(args, load_settings())
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    try:
        journal = JournalWriter(
            journal_dir=settings.journal_dir,
            snapshot_dir=settings.weather_snapshot_dir,
            session_id=session_id,
        )
        journal.write_event(
            "weather_startup",
            payload=settings.safe_summary(),
            metadata={"session_id": session_id},
        )
    except JournalError as exc:
        logger.error("Failed to initialize weather journal: %s", exc)
        return 3

    exit_code = 0
    try:
        lat, lon = _validate_cli_input(args, settings)
        journal.write_event(
            "weather_request_start",
            payload={"lat": lat, "lon": lon, "locale": settings.applet_locale},
            metadata={"session_id": session_id},
        )

        weather, errors = asyncio.run(_refresh(settings, lat, lon, logger))
        if weather is None:
            exit_code = 4
            journal.write_event(
                "weather_request_failure",
                payload={"errors": [error.model_dump(mode="json") for error in errors]},
                metadata={"session_id": session_id},
            )
            _print_errors(console, errors)
        else:
            snapshot = weather.model_dump(mode="json")
            if settings.weather_journal_snapshot_files:
                snapshot_path = journal.write_snapshot_file("yandex_snapshot", snapshot)
                snapshot["snapshot_path"] = str(snapshot_path)
            journal.write_event(
                "weather_snapshot_normalized",
                payload=snapshot,
                metadata={"session_id": session_id},
            )
            _print_snapshot_summary(console, weather)
    except (WeatherProviderError, JournalError) as exc:
        exit_code = 4
        logger.error("Weather refresh failure: %s", exc)
        try:
            journal.write_event(
                "weather_request_failure",
                payload={"error": str(exc)},
                metadata={"session_id": session_id},
            )
        except JournalError:
            logger.error("Failed to write weather_request_failure event.")
    finally:
        try:
            journal.write_event(
                "weather_shutdown",
                payload={"exit_code": exit_code},
                metadata={"session_id": session_id},
            )
        except JournalError:
            logger.error("Failed to write weather_shutdown event.")

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
