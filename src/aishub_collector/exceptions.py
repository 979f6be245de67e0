"""Error types raised across the collector."""

from typing import Optional


class CollectorError(Exception):
    """Base class for all collector failures."""


class SettingsLoadError(CollectorError):
    """The configuration file could not be read or failed validation."""


class FatalStartupError(CollectorError):
    """No valid settings could be obtained on the first load."""


class SettingsReloadError(CollectorError):
    """A reload failed and the last known good settings were kept."""


class FetchError(CollectorError):
    """The aggregator could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(FetchError):
    """The aggregator rejected the request as too frequent."""


class ParseError(CollectorError):
    """The aggregator response could not be decoded."""


class PersistError(CollectorError):
    """A record could not be written to its vessel file."""
