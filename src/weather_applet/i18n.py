"""Localized string lookup for user-facing applet messages."""

from __future__ import annotations

import gettext
from pathlib import Path

DOMAIN = "weather-applet"
LOCALE_DIR = Path(__file__).resolve().parent / "locale"


def get_translator(languages: list[str] | None = None) -> gettext.NullTranslations:
    """Return the message catalog for `languages`, or an identity catalog when none is installed."""
    return gettext.translation(DOMAIN, localedir=LOCALE_DIR, languages=languages, fallback=True)


def _(message: str) -> str:
    return get_translator().gettext(message)
