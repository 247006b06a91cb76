from __future__ import annotations

import re
from dataclasses import replace
from typing import List, Optional, Protocol

from .exceptions import ExtractionFailure
from .models import Feed, Item

# matches anything between double quotes, like `<a href="matches this">foo</a>`
_QUOTED_RE = re.compile(r'"((?:\\.|[^"\\])*)"')


class SiteQuirk(Protocol):
    """Source-specific item rewrite, applied after link absolutization."""

    def supports(self, feed: Feed) -> bool:  # pragma: no cover - interface
        ...

    def apply(self, item: Item, feed: Feed) -> Item:  # pragma: no cover - interface
        ...


class RedditCommentsQuirk:
    """
    Subreddit feeds link every entry to the thread itself. For link submissions
    the real target and the comments page are only present as anchors inside
    the entry content:

        submitted by <a href="user">/u/x</a> <a href="target">[link]</a> <a href="comments">[comments]</a>
    """

    marker = "submitted by"
    anchor = "<a href="

    def supports(self, feed: Feed) -> bool:
        return bool(feed.feed_url) and "reddit.com/r/" in feed.feed_url

    def apply(self, item: Item, feed: Feed) -> Item:
        snippet = (item.content_snippet or "").lstrip()
        if not snippet.startswith(self.marker):
            return item
        segments = (item.content or "").split(self.anchor)
        # [0] text before anchors, [1] user link, [2] content link, [3] comments link
        if len(segments) < 4:
            raise ExtractionFailure(
                f"Expected link and comments anchors in {item.link or feed.feed}", url=feed.feed
            )
        link = _first_quoted(segments[2])
        comments = _first_quoted(segments[3])
        if link is None or comments is None:
            raise ExtractionFailure(
                f"Malformed submission anchors in {item.link or feed.feed}", url=feed.feed
            )
        return replace(item, link=link, comments=comments)


def _first_quoted(text: str) -> Optional[str]:
    m = _QUOTED_RE.search(text)
    return m.group(1) if m else None


QUIRKS: List[SiteQuirk] = [RedditCommentsQuirk()]


def quirk_for(feed: Feed, quirks: Optional[List[SiteQuirk]] = None) -> Optional[SiteQuirk]:
    for quirk in QUIRKS if quirks is None else quirks:
        if quirk.supports(feed):
            return quirk
    return None
