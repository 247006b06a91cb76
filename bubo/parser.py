from __future__ import annotations

import io
import json
import logging
import re
from html import unescape
from typing import Any, Dict, List, Mapping, Optional, Union

import feedparser

from .dates import parse_date, struct_to_datetime, to_iso
from .exceptions import EmptyFeedFailure, FeedParseError
from .models import Feed, Item

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 100
ELLIPSIS = "..."

_HTML_TAG_RE = re.compile(r"<[^>]+>")


def truncate_title(title: str) -> str:
    if len(title) > MAX_TITLE_LENGTH:
        return title[: MAX_TITLE_LENGTH - len(ELLIPSIS)] + ELLIPSIS
    return title


def resolve_title(meta: Mapping[str, Any]) -> str:
    """
    Pick a display title for a feed.
    Priority: title -> description -> channel title -> channel description -> link.
    """
    channel = meta.get("channel") or {}
    for candidate in (
        meta.get("title"),
        meta.get("description"),
        channel.get("title"),
        channel.get("description"),
        meta.get("link"),
    ):
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return ""


def html_to_text(html: Optional[str]) -> Optional[str]:
    if html is None:
        return None
    return unescape(_HTML_TAG_RE.sub("", html)).strip()


def _looks_like_json(data: bytes) -> bool:
    return data.lstrip()[:1] == b"{"


def parse_feed(body: Union[bytes, str], url: str) -> Feed:
    """
    Parse a feed document (RSS, Atom or JSON Feed) into a canonical Feed.

    Items come back un-normalized: no timestamp, links as published.
    Raises FeedParseError for unreadable documents and EmptyFeedFailure when
    the document holds no items.
    """
    data = body.encode("utf-8") if isinstance(body, str) else body
    if _looks_like_json(data):
        feed = _parse_json_feed(data, url)
    else:
        feed = _parse_xml_feed(data, url)

    if not feed.items:
        raise EmptyFeedFailure(f"Feed at {url} contains no items.", url=url)
    logger.debug("parsed %s: %d items", url, len(feed.items))
    return feed


def _parse_xml_feed(data: bytes, url: str) -> Feed:
    parsed = feedparser.parse(io.BytesIO(data))
    entries = parsed.get("entries") or []
    if parsed.get("bozo") and not entries:
        exc = parsed.get("bozo_exception")
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise FeedParseError(msg, url=url)

    meta = parsed.get("feed") or {}
    feed_url = None
    for link in meta.get("links") or []:
        if link.get("rel") == "self" and link.get("href"):
            feed_url = link["href"]
            break

    # feedparser exposes the RSS <channel> as both `feed` and `channel`
    title = resolve_title({
        "title": meta.get("title"),
        "description": meta.get("subtitle"),
        "channel": parsed.get("channel") or {},
        "link": meta.get("link"),
    })
    return Feed(
        title=truncate_title(title),
        link=meta.get("link") or "",
        feed=url,
        feed_url=feed_url,
        items=tuple(_xml_entry_to_item(e) for e in entries),
    )


def _xml_entry_to_item(entry: Mapping[str, Any]) -> Item:
    content = None
    contents = entry.get("content")
    if isinstance(contents, list) and contents:
        content = contents[0].get("value")
    if content is None:
        content = entry.get("summary")

    iso = None
    for key in ("published_parsed", "updated_parsed", "created_parsed"):
        iso = to_iso(struct_to_datetime(entry.get(key)))
        if iso:
            break

    return Item(
        title=(entry.get("title") or "").strip(),
        link=(entry.get("link") or "").strip(),
        pub_date=entry.get("published"),
        iso_date=iso,
        date=entry.get("updated"),
        comments=entry.get("comments"),
        content=content,
        content_snippet=html_to_text(content),
        guid=entry.get("id"),
    )


def _parse_json_feed(data: bytes, url: str) -> Feed:
    try:
        doc = json.loads(data)
    except ValueError as e:
        raise FeedParseError(f"Invalid JSON feed: {url} ({e})", url=url) from e
    if not isinstance(doc, dict) or not isinstance(doc.get("items", []), list):
        raise FeedParseError(f"Invalid JSON feed: {url}", url=url)

    title = resolve_title({
        "title": doc.get("title"),
        "description": doc.get("description"),
        "link": doc.get("home_page_url"),
    })
    items: List[Item] = [
        _json_entry_to_item(e) for e in doc.get("items") or [] if isinstance(e, dict)
    ]
    return Feed(
        title=truncate_title(title),
        link=doc.get("home_page_url") or "",
        feed=url,
        feed_url=doc.get("feed_url"),
        items=tuple(items),
    )


def _json_entry_to_item(entry: Dict[str, Any]) -> Item:
    content = entry.get("content_html") or entry.get("content_text") or entry.get("summary")
    published = entry.get("date_published")
    modified = entry.get("date_modified")
    return Item(
        title=(entry.get("title") or "").strip(),
        link=(entry.get("url") or entry.get("external_url") or "").strip(),
        iso_date=to_iso(parse_date(published) or parse_date(modified)),
        date=modified,
        published=published,
        content=content,
        content_snippet=html_to_text(content),
        guid=str(entry["id"]) if entry.get("id") is not None else None,
    )
