from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

from .exceptions import ValidationFailure

CONTENT_TYPES = frozenset({
    "application/json",
    "application/atom+xml",
    "application/rss+xml",
    "application/xml",
    "application/octet-stream",
    "text/xml",
    "application/x-rss+xml",
    "application/force-download",
})

FEED_EXTENSIONS = (".rss", ".xml", ".rdf")


def media_type(header: Optional[str]) -> str:
    # e.g., `application/xml; charset=utf-8` -> `application/xml`
    if not header:
        return ""
    return header.split(";", 1)[0].strip().lower()


def has_feed_extension(url: str) -> bool:
    """Fallback for servers that send a wrong content-type for static feed files."""
    path = urlsplit(url).path.lower()
    return path.endswith(FEED_EXTENSIONS)


def is_acceptable(content_type: Optional[str], url: str) -> bool:
    return media_type(content_type) in CONTENT_TYPES or has_feed_extension(url)


def validate(content_type: Optional[str], url: str) -> None:
    if not is_acceptable(content_type, url):
        raise ValidationFailure(
            f"Feed at {url} has invalid content-type: {content_type!r}", url=url
        )
