from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import httpx

from .aggregator import merge, sort_groups, sort_items
from .cache import read_snapshot, write_snapshot
from .config import Config, Registry, registry_urls
from .dates import now
from .exceptions import FeedError
from .fetcher import FetchOutcome, fetch_all, new_client
from .models import BuildResult, Feed, Group, Item, Snapshot
from .normalizer import normalize_feed
from .parser import parse_feed
from .validator import validate

logger = logging.getLogger(__name__)


def process_outcome(outcome: FetchOutcome, config: Config) -> Feed:
    """
    Turn one settled fetch into a normalized Feed.

    Raises a FeedError subclass for whichever stage rejected the source.
    """
    response = outcome.raise_for_error()
    validate(response.headers.get("content-type"), outcome.url)
    feed = parse_feed(response.content, outcome.url)
    return normalize_feed(feed, config)


class FeedReader:
    """
    High-level API: fetch the feeds of a registry and return a BuildResult.

    Pipeline: fetch → validate → parse → normalize → sort (newest first)

    Every source either contributes a complete feed or ends up in `errors`.
    """

    def __init__(
        self,
        *,
        config: Optional[Config] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or Config()
        self._client = client

    async def build(self, registry: Registry) -> BuildResult:
        if self._client is not None:
            return await self._build(self._client, registry)
        async with new_client() as client:
            return await self._build(client, registry)

    async def build_and_cache(self, registry: Registry, cache_path: str) -> BuildResult:
        result = await self.build(registry)
        write_snapshot(cache_path, result.to_snapshot())
        return result

    def from_snapshot(self, snapshot: Snapshot) -> BuildResult:
        """Rebuild from cached state; sorting again is a no-op on sorted input."""
        return self._finish(snapshot.groups, [], all_items=snapshot.all_items)

    def from_cache(self, cache_path: str) -> BuildResult:
        return self.from_snapshot(read_snapshot(cache_path))

    async def _build(self, client: httpx.AsyncClient, registry: Registry) -> BuildResult:
        errors: List[str] = []
        groups: List[Group] = []
        # one pass per group; all sources of the group are in flight together
        for group_name in registry:
            outcomes = await fetch_all(registry_urls(registry, group_name), client)
            feeds: List[Feed] = []
            for outcome in outcomes:
                feed = self._accept(outcome, errors)
                if feed is not None:
                    feeds.append(feed)
            logger.info("Group %s: %d/%d feeds", group_name, len(feeds), len(outcomes))
            groups.append((group_name, feeds))
        return self._finish(groups, errors)

    def _accept(self, outcome: FetchOutcome, errors: List[str]) -> Optional[Feed]:
        try:
            return process_outcome(outcome, self.config)
        except FeedError as e:
            logger.error("%s: %s", type(e).__name__, e)
        except Exception:
            logger.exception("Unexpected error while processing %s", outcome.url)
        errors.append(outcome.url)
        return None

    def _finish(
        self,
        groups: List[Group],
        errors: List[str],
        all_items: Optional[List[Item]] = None,
    ) -> BuildResult:
        # items are merged in processing order, before feeds are reordered
        items = merge(groups) if all_items is None else sort_items(all_items)
        groups = sort_groups(groups)
        return BuildResult(
            all_items=items,
            groups=groups,
            errors=errors,
            generated_at=now(self.config.timezone_offset),
        )


def build_live(registry: Registry, config: Optional[Config] = None) -> BuildResult:
    """Fetch everything from the network."""
    return asyncio.run(FeedReader(config=config).build(registry))


def build_and_cache(registry: Registry, cache_path: str, config: Optional[Config] = None) -> BuildResult:
    """Fetch everything from the network and overwrite the cache snapshot."""
    return asyncio.run(FeedReader(config=config).build_and_cache(registry, cache_path))


def build_from_cache(cache_path: str, config: Optional[Config] = None) -> BuildResult:
    """Rebuild from the cache snapshot only; no network access."""
    return FeedReader(config=config).from_cache(cache_path)
