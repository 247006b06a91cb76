from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import httpx

from .exceptions import FetchFailure

logger = logging.getLogger(__name__)

USER_AGENT = "bubo-reader/1.0 (+static feed reader)"


@dataclass
class FetchOutcome:
    """Settled result of one GET: either a response or the error that ended it."""
    url: str
    response: Optional[httpx.Response] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.response is not None and self.error is None

    def raise_for_error(self) -> httpx.Response:
        if not self.ok:
            raise FetchFailure(f"Error fetching {self.url}: {self.error}", url=self.url) from self.error
        return self.response


async def fetch_source(client: httpx.AsyncClient, url: str) -> FetchOutcome:
    """
    Fetch a single feed URL.

    Network/transport errors are captured on the outcome instead of raised, so a
    batch joined with `fetch_all` always settles every source.
    """
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        logger.debug("fetch failed for %s: %r", url, e)
        return FetchOutcome(url=url, error=e)
    logger.debug("fetched %s (%s)", url, response.status_code)
    return FetchOutcome(url=url, response=response)


async def fetch_all(
    urls: Iterable[str],
    client: Optional[httpx.AsyncClient] = None,
) -> List[FetchOutcome]:
    """
    Fetch many feeds concurrently and wait for all of them to settle.

    Failures on individual URLs are isolated and never abort the batch. There is
    no retry and no cancellation; each request runs with the transport defaults.
    """
    urls = list(urls)
    if client is None:
        async with new_client() as owned:
            return await _gather(owned, urls)
    return await _gather(client, urls)


async def _gather(client: httpx.AsyncClient, urls: List[str]) -> List[FetchOutcome]:
    results = await asyncio.gather(
        *(fetch_source(client, u) for u in urls), return_exceptions=True
    )
    outcomes: List[FetchOutcome] = []
    for url, res in zip(urls, results):
        if isinstance(res, BaseException):
            # Anything fetch_source did not anticipate still settles as a failure
            outcomes.append(FetchOutcome(url=url, error=res))
        else:
            outcomes.append(res)
    return outcomes


def new_client(**kwargs) -> httpx.AsyncClient:
    kwargs.setdefault("follow_redirects", True)
    kwargs.setdefault("headers", {"User-Agent": USER_AGENT})
    return httpx.AsyncClient(**kwargs)
