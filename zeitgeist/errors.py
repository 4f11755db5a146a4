"""
Exception types raised by Zeitgeist.
"""


class ZeitgeistError(Exception):
    """Base class for all Zeitgeist errors."""


class ConfigurationError(ZeitgeistError, ValueError):
    """Raised when thresholds or settings are inconsistent or unreadable."""


class ResourceLoadError(ZeitgeistError, RuntimeError):
    """Raised when a bundled resource (e.g. the stop-word list) cannot be loaded."""


class FeedError(ZeitgeistError):
    """Raised when a downloaded feed cannot be parsed."""

    def __init__(self, feed_url: str, message: str):
        super().__init__(f"{feed_url}: {message}")
        self.feed_url = feed_url
