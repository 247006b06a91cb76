from __future__ import annotations

from typing import Optional


class FeedError(Exception):
    """Base class for per-source failures. The source is dropped, the build goes on."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class FetchFailure(FeedError):
    """Raised when a feed URL cannot be fetched over the network."""


class ValidationFailure(FeedError):
    """Raised when a response does not look like a feed payload."""


class FeedParseError(FeedError):
    """Raised when a feed document cannot be parsed into expected fields."""


class EmptyFeedFailure(FeedError):
    """Raised when a parsed feed contains no items."""


class ExtractionFailure(FeedError):
    """Raised when a site-specific link extraction finds no usable markup."""


class ConfigError(Exception):
    """Raised when a registry or config file exists but is not valid JSON."""


class CacheError(ConfigError):
    """Raised when a cache snapshot exists but cannot be read back."""
