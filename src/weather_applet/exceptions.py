"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherProviderError(Exception):
    """Raised when weather request input is unusable before a provider call."""


class JournalError(Exception):
    """Raised when writing to journal files fails."""
