# crawlscope/crawler/fetcher.py
"""
Fetcher module: the default fetch/parse collaborator over aiohttp.

Every call returns a :class:`FetchResult`; network errors, timeouts,
non-200 statuses and non-HTML bodies are reported as failures instead of
being raised.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from crawlscope.crawler.link_extractor import extract_links
from crawlscope.crawler.models import FetchResult, PageData

__all__: Sequence[str] = ("FetchFunc", "HttpFetcher", "RETRY_STATUS")

#: signature every fetch collaborator implements
FetchFunc = Callable[[str], Awaitable[FetchResult]]

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

logger = logging.getLogger("CrawlScope")


class HttpFetcher:
    """Fetches a URL with aiohttp and parses its anchors with BeautifulSoup."""

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        user_agent: str = "CrawlScopeBot/1.0",
        retry_times: int = 2,
        retry_status: Sequence[int] = RETRY_STATUS,
        backoff: float = 1.0,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.retry_times = retry_times
        self._retry_status = retry_status
        self.backoff = backoff
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> HttpFetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()
            self.session = None

    async def __call__(self, url: str) -> FetchResult:
        return await self.fetch(url)

    async def fetch(self, url: str) -> FetchResult:
        """Fetch *url*, retrying on 5xx/429 and connection errors with backoff."""
        if self.session is None:
            raise RuntimeError("Session not initialized")
        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    if resp.status in self._retry_status:
                        raise ClientError(f"retryable status {resp.status}")
                    if resp.status != 200:
                        return FetchResult.failure(url, f"HTTP {resp.status}")
                    mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                    if mime and "html" not in mime:
                        return FetchResult.failure(url, f"not HTML ({mime})")
                    text = await resp.text()
            except asyncio.TimeoutError:
                # no retry on timeout
                return FetchResult.failure(url, "timed out")
            except (ClientError, UnicodeDecodeError) as exc:
                attempts += 1
                if attempts > self.retry_times:
                    return FetchResult.failure(url, str(exc) or type(exc).__name__)
                delay = min(self.backoff * 2**attempts, 60)
                logger.debug("Retry %d/%d for %s after %.1f s", attempts, self.retry_times, url, delay)
                await asyncio.sleep(delay)
                continue

            page = PageData(url=url, content=text, status=200)
            try:
                links = extract_links(page)
            except Exception as exc:  # bs4 may choke on pathological markup
                return FetchResult.failure(url, f"parse error: {exc}")
            return FetchResult.success(page, links)
