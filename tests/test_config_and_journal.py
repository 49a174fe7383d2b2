"""Settings validation, redaction, and journal serialization."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

import pytest

from weather_applet.config import YANDEX_INFORMERS_URL, Settings, load_settings
from weather_applet.exceptions import ConfigError, JournalError
from weather_applet.journal import JournalWriter, _json_default
from weather_applet.log_setup import JsonConsoleFormatter, SessionFilter, setup_logger
from weather_applet.redaction import REDACTED, sanitize_for_logging, sanitize_text
from weather_applet.weather.models import WeatherData


def test_defaults_build_provider_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("YANDEX_API_KEY", raising=False)
    settings = Settings(_env_file=None)
    config = settings.provider_config()

    assert config.base_url == YANDEX_INFORMERS_URL
    assert config.api_key == ""
    assert config.current_locale == "en"
    assert config.translate_condition is True
    assert config.service_name == "yandexweather"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("YANDEX_API_KEY", "secret-key")
    monkeypatch.setenv("APPLET_LOCALE", "tr-tr")
    monkeypatch.setenv("TRANSLATE_CONDITION", "false")
    monkeypatch.setenv("WEATHER_SERVICE_NAME", "yandex")
    monkeypatch.setenv("WEATHER_DEFAULT_LAT", "41.0")
    monkeypatch.setenv("WEATHER_DEFAULT_LON", "29.0")

    settings = Settings(_env_file=None)

    assert settings.provider_config().translate_condition is False
    assert settings.provider_config().service_name == "yandex"
    assert settings.weather_default_lat == 41.0
    assert "secret-key" not in repr(settings)
    assert "secret-key" not in json.dumps(settings.safe_summary())
    assert settings.safe_summary()["api_key_configured"] is True


def test_empty_strings_parse_as_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEATHER_DEFAULT_LAT", "")
    monkeypatch.setenv("WEATHER_DEFAULT_LON", "")
    monkeypatch.setenv("APPLET_LOCALE", " ")
    monkeypatch.setenv("WEATHER_SERVICE_NAME", "")

    settings = Settings(_env_file=None)

    assert settings.weather_default_lat is None
    assert settings.weather_default_lon is None
    assert settings.applet_locale is None
    assert settings.weather_service_name is None


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("WEATHER_TIMEOUT_SECONDS", "0"),
        ("WEATHER_DEFAULT_LAT", "91"),
        ("WEATHER_DEFAULT_LON", "-181"),
        ("YANDEX_BASE_URL", "not a url"),
    ],
)
def test_invalid_settings_raise_config_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, name: str, value: str
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_settings()


def test_load_settings_creates_journal_dirs(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("JOURNAL_DIR", str(tmp_path / "j"))
    monkeypatch.setenv("WEATHER_SNAPSHOT_DIR", str(tmp_path / "s"))

    load_settings()

    assert (tmp_path / "j").is_dir()
    assert (tmp_path / "s").is_dir()


def test_sanitize_text_redacts_api_key_header() -> None:
    text = "headers={'X-Yandex-API-Key': 'abc123'} api_key=zzz token: t0k"
    sanitized = sanitize_text(text)
    assert "abc123" not in sanitized
    assert "zzz" not in sanitized
    assert "t0k" not in sanitized


def test_sanitize_for_logging_redacts_sensitive_keys() -> None:
    value = {
        "headers": {"X-Yandex-API-Key": "abc", "Accept": "application/json"},
        "items": [{"api_key": "x"}, "plain"],
    }
    sanitized = sanitize_for_logging(value)
    assert sanitized["headers"]["X-Yandex-API-Key"] == REDACTED
    assert sanitized["headers"]["Accept"] == "application/json"
    assert sanitized["items"] == [{"api_key": REDACTED}, "plain"]


def test_log_formatter_redacts_key_in_message() -> None:
    formatter = JsonConsoleFormatter()
    record = logging.LogRecord(
        name="test",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="request failed X-Yandex-API-Key=abc123",
        args=(),
        exc_info=None,
    )
    output = json.loads(formatter.format(record))
    assert output["level"] == "ERROR"
    assert "abc123" not in output["message"]


def test_log_formatter_emits_applet_error_fields_and_session() -> None:
    record = logging.LogRecord(
        name="weather_applet",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Applet error: %s",
        args=("Location not found",),
        exc_info=None,
    )
    record.service = "yandexweather"
    record.detail = "location not found"
    record.error_type = "soft"
    record.user_error = True
    SessionFilter("sess-1").filter(record)

    output = json.loads(JsonConsoleFormatter().format(record))

    assert output["message"] == "Applet error: Location not found"
    assert output["session_id"] == "sess-1"
    assert output["service"] == "yandexweather"
    assert output["detail"] == "location not found"
    assert output["error_type"] == "soft"
    assert output["user_error"] is True


def test_log_formatter_omits_unset_applet_fields() -> None:
    record = logging.LogRecord(
        name="weather_applet",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="refresh done",
        args=(),
        exc_info=None,
    )

    output = json.loads(JsonConsoleFormatter().format(record))

    assert set(output) == {"ts", "level", "logger", "message"}


def test_setup_logger_moves_existing_handler_to_new_session() -> None:
    logger = setup_logger("test_weather_applet_session", session_id="first")
    setup_logger("test_weather_applet_session", session_id="second")

    assert len(logger.handlers) == 1
    (session_filter,) = [f for f in logger.handlers[0].filters if isinstance(f, SessionFilter)]
    assert session_filter.session_id == "second"


def test_journal_writes_snapshot_event(tmp_path: Path) -> None:
    journal = JournalWriter(
        journal_dir=tmp_path / "journal",
        snapshot_dir=tmp_path / "snapshots",
        session_id="journaltest",
    )
    weather = WeatherData(temperature=293.15, date=datetime(2026, 1, 1, tzinfo=UTC))

    journal.write_event("weather_snapshot_normalized", payload=weather.model_dump(mode="json"))
    path = journal.write_snapshot_file("yandex snapshot", weather.model_dump(mode="json"))

    lines = journal.events_path.read_text(encoding="utf-8").strip().splitlines()
    record = json.loads(lines[0])
    assert record["event_type"] == "weather_snapshot_normalized"
    assert record["session_id"] == "journaltest"
    assert record["payload"]["temperature"] == 293.15
    assert path.exists()
    assert "yandex_snapshot" in path.name


def test_journal_redacts_api_key(tmp_path: Path) -> None:
    journal = JournalWriter(tmp_path / "journal", tmp_path / "snapshots", "redacttest")
    journal.write_event(
        "weather_request_failure",
        payload={"error": "X-Yandex-API-Key=abc123", "headers": {"X-Yandex-API-Key": "abc123"}},
    )
    content = journal.events_path.read_text(encoding="utf-8")
    assert "abc123" not in content
    assert REDACTED in content


def test_journal_non_serializable_raises_journal_error(tmp_path: Path) -> None:
    journal = JournalWriter(tmp_path / "journal", tmp_path / "snapshots", "badtest")
    with pytest.raises(JournalError):
        journal.write_event("bad", payload={"value": object()})
    with pytest.raises(JournalError):
        journal.write_snapshot_file("bad", {"value": object()})


def test_json_default_normalizes_naive_datetimes() -> None:
    assert _json_default(datetime(2026, 1, 1, 12, 0)) == "2026-01-01T12:00:00+00:00"
    assert _json_default(Path("a/b")) == str(Path("a/b"))
