"""
bubo

A dead simple feed reader core: fetches RSS/Atom/JSON feeds grouped by site and
returns one normalized, newest-first item set for static page rendering.

Core ideas:
- Input: a registry of group name → {source name → feed URL}
- Process: fetch (concurrently) → validate content-type → parse → normalize → sort
- Output: BuildResult(all_items, groups, errors, generated_at)

Example
-------
from bubo import Config, build_live

result = build_live(
    {"news": {"bbc": "https://feeds.bbci.co.uk/news/rss.xml"}},
    Config(redirects={"reddit": "old.reddit.com"}, timezone_offset=-5),
)

for item in result.all_items:
    print(item.timestamp, item.title, item.link)
"""
from .config import Config
from .core import FeedReader, build_and_cache, build_from_cache, build_live
from .models import BuildResult, Feed, Item, Snapshot

__all__ = [
    "BuildResult",
    "Config",
    "Feed",
    "FeedReader",
    "Item",
    "Snapshot",
    "build_and_cache",
    "build_from_cache",
    "build_live",
]
