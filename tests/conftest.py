from __future__ import annotations

from typing import Dict, Iterable, Tuple

import httpx
import pytest

RSS_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>{title}</title>
    <link>{link}</link>
    <description>Example feed</description>
    {items}
  </channel>
</rss>
"""

RSS_ITEM = """<item>
      <title>{title}</title>
      <link>{link}</link>
      <pubDate>{date}</pubDate>
      <description>Body of {title}</description>
    </item>"""


def rss_doc(items: Iterable[Tuple[str, str, str]], title: str = "Example", link: str = "https://example.com/") -> bytes:
    """items: (title, link, RFC 822 date)"""
    body = "\n".join(RSS_ITEM.format(title=t, link=l, date=d) for t, l, d in items)
    return RSS_TEMPLATE.format(title=title, link=link, items=body).encode("utf-8")


REDDIT_ATOM = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Python</title>
  <link rel="self" href="https://www.reddit.com/r/python/.rss" type="application/atom+xml" />
  <link rel="alternate" href="https://www.reddit.com/r/python/" />
  <updated>2024-03-07T12:00:00+00:00</updated>
  <id>/r/python/.rss</id>
  <entry>
    <title>A link post</title>
    <id>t3_abc</id>
    <link href="https://www.reddit.com/r/python/comments/abc/a_link_post/" />
    <published>2024-03-07T10:00:00+00:00</published>
    <updated>2024-03-07T10:00:00+00:00</updated>
    <content type="html">{content}</content>
  </entry>
</feed>
"""

REDDIT_CONTENT = (
    'submitted by <a href="https://www.reddit.com/user/someone">/u/someone</a> '
    '<span><a href="https://blog.example.org/post">[link]</a></span> '
    '<span><a href="https://www.reddit.com/r/python/comments/abc/a_link_post/">[comments]</a></span>'
)


def reddit_doc(content: str = REDDIT_CONTENT) -> bytes:
    escaped = content.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")
    return REDDIT_ATOM.format(content=escaped).encode("utf-8")


def mock_client(routes: Dict[str, object]) -> httpx.AsyncClient:
    """
    routes: URL -> httpx.Response, or an exception instance to raise for that URL.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, headers={"content-type": "text/html"}, text="not found")
        if isinstance(route, Exception):
            raise route
        return route

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def feed_response(content: bytes, content_type: str = "application/rss+xml; charset=utf-8") -> httpx.Response:
    return httpx.Response(200, headers={"content-type": content_type}, content=content)


@pytest.fixture
def single_item_rss() -> bytes:
    return rss_doc([("Only post", "https://example.com/only", "Thu, 07 Mar 2024 10:00:00 GMT")])
