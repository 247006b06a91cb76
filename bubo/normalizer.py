from __future__ import annotations

from dataclasses import replace
from typing import Mapping, Optional
from urllib.parse import urlsplit

from .aggregator import sort_items
from .config import Config
from .dates import format_timestamp, parse_date
from .models import Feed, Item
from .quirks import SiteQuirk, quirk_for


def absolutize(link: str, base: str) -> str:
    """Prefix a scheme-less link with the feed's site URL."""
    if not link or not base or urlsplit(link).scheme:
        return link
    # if the base ends with a /, and the item link begins with a /
    if base.endswith("/") and link.startswith("/"):
        return base + link[1:]
    return base + link


def redirect(link: str, redirects: Mapping[str, str]) -> str:
    """
    Rewrite the host of `link` when its second-level domain has a configured
    replacement, e.g. {"reddit": "old.reddit.com"}. Path and query are kept.
    """
    if not redirects or not link:
        return link
    url = urlsplit(link)
    tokens = (url.hostname or "").split(".")
    if len(tokens) < 2:
        return link
    target = redirects.get(tokens[-2])
    if not target:
        return link
    query = f"?{url.query}" if url.query else ""
    return f"https://{target}{url.path or '/'}{query}"


def normalize_item(
    item: Item,
    feed: Feed,
    config: Config,
    quirk: Optional[SiteQuirk] = None,
) -> Item:
    """
    Apply, in order: date normalization, link absolutization, site quirk,
    redirect. Each step sees the output of the previous one.

    Raises ExtractionFailure when the site quirk cannot find its markup.
    """
    # 1. normalize date attribute naming into a display timestamp
    item = replace(
        item,
        timestamp=format_timestamp(parse_date(item.raw_date), config.timezone_offset),
    )

    # 2. correct link url if it lacks the hostname
    item = replace(item, link=absolutize(item.link, feed.link))

    # 3. source-specific extraction
    if quirk is not None:
        item = quirk.apply(item, feed)

    # 4. redirects
    if config.redirects:
        item = replace(item, link=redirect(item.link, config.redirects))
    return item


def normalize_feed(feed: Feed, config: Config) -> Feed:
    """Normalize every item of a parsed feed and order them newest first."""
    quirk = quirk_for(feed)
    items = [normalize_item(it, feed, config, quirk) for it in feed.items]
    return replace(feed, items=tuple(sort_items(items)))
