from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

# Snapshot keys, kept compatible with cache files written by earlier builds.
_ITEM_KEYS = {
    "title": "title",
    "link": "link",
    "pub_date": "pubDate",
    "iso_date": "isoDate",
    "date": "date",
    "published": "published",
    "timestamp": "timestamp",
    "comments": "comments",
    "content": "content",
    "content_snippet": "contentSnippet",
    "guid": "guid",
}


@dataclass(frozen=True)
class Item:
    """
    Stable public model representing one normalized feed entry.

    WARNING: Do not change fields lightly. Cache snapshots depend on them.
    """
    title: str
    link: str
    pub_date: Optional[str] = None
    iso_date: Optional[str] = None
    date: Optional[str] = None
    published: Optional[str] = None
    timestamp: str = ""
    comments: Optional[str] = None
    content: Optional[str] = None
    content_snippet: Optional[str] = None
    guid: Optional[str] = None

    @property
    def raw_date(self) -> Optional[str]:
        """First present date field, in the order feeds most commonly use them."""
        return self.pub_date or self.iso_date or self.date or self.published

    def to_dict(self) -> Dict[str, Any]:
        out = {}
        for attr, key in _ITEM_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        kwargs = {attr: data.get(key) for attr, key in _ITEM_KEYS.items()}
        kwargs["title"] = kwargs["title"] or ""
        kwargs["link"] = kwargs["link"] or ""
        kwargs["timestamp"] = kwargs["timestamp"] or ""
        return cls(**kwargs)


@dataclass(frozen=True)
class Feed:
    title: str
    link: str
    feed: str = ""
    feed_url: Optional[str] = None
    items: Tuple[Item, ...] = ()

    @property
    def first_item(self) -> Optional[Item]:
        return self.items[0] if self.items else None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title, "link": self.link, "feed": self.feed}
        if self.feed_url is not None:
            out["feedUrl"] = self.feed_url
        out["items"] = [it.to_dict() for it in self.items]
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feed":
        return cls(
            title=data.get("title") or "",
            link=data.get("link") or "",
            feed=data.get("feed") or "",
            feed_url=data.get("feedUrl"),
            items=tuple(Item.from_dict(it) for it in data.get("items") or []),
        )


Group = Tuple[str, List[Feed]]


def _groups_to_list(groups: List[Group]) -> List[Any]:
    return [[name, [f.to_dict() for f in feeds]] for name, feeds in groups]


@dataclass
class Snapshot:
    """Serializable final pipeline state, enough to rebuild without the network."""
    groups: List[Group] = field(default_factory=list)
    all_items: List[Item] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groups": _groups_to_list(self.groups),
            "allItems": [it.to_dict() for it in self.all_items],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        groups = [
            (name, [Feed.from_dict(f) for f in feeds])
            for name, feeds in data.get("groups") or []
        ]
        items = [Item.from_dict(it) for it in data.get("allItems") or []]
        return cls(groups=groups, all_items=items)


@dataclass
class BuildResult:
    """Everything the page renderer needs from one build."""
    all_items: List[Item]
    groups: List[Group]
    errors: List[str]
    generated_at: datetime

    def to_snapshot(self) -> Snapshot:
        return Snapshot(groups=self.groups, all_items=self.all_items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allItems": [it.to_dict() for it in self.all_items],
            "groups": _groups_to_list(self.groups),
            "errors": list(self.errors),
            "now": self.generated_at.isoformat(),
        }
