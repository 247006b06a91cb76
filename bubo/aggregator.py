from __future__ import annotations

from datetime import datetime
from functools import cmp_to_key
from typing import Iterable, List, Optional

from .dates import parse_date
from .models import Feed, Group, Item


def sort_date(item: Optional[Item]) -> Optional[datetime]:
    if item is None:
        return None
    return parse_date(item.iso_date or item.pub_date)


def by_date(a: Optional[Item], b: Optional[Item]) -> int:
    """
    Newest-first comparator. A pair where either side has no usable date
    compares equal, so undated items keep their position under a stable sort.
    """
    a_date, b_date = sort_date(a), sort_date(b)
    if a_date is None or b_date is None:
        return 0
    if a_date > b_date:
        return -1
    if a_date < b_date:
        return 1
    return 0


# sorted() is stable, which the equal-when-undated policy relies on.
def sort_items(items: Iterable[Item]) -> List[Item]:
    return sorted(items, key=cmp_to_key(by_date))


def sort_feeds(feeds: Iterable[Feed]) -> List[Feed]:
    """Order feeds by their most recent item."""
    return sorted(feeds, key=cmp_to_key(lambda a, b: by_date(a.first_item, b.first_item)))


def sort_groups(groups: Iterable[Group]) -> List[Group]:
    return [(name, sort_feeds(feeds)) for name, feeds in groups]


def merge(groups: Iterable[Group]) -> List[Item]:
    """All items of all feeds of all groups, in one newest-first list."""
    items: List[Item] = []
    for _name, feeds in groups:
        for feed in feeds:
            items.extend(feed.items)
    return sort_items(items)
