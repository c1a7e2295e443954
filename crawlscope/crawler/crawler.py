# crawlscope/crawler/crawler.py
"""
Traversal engine: visits every in-scope, crawlable link reachable from a
seed URL exactly once.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable, FrozenSet, List, Optional, Sequence, Tuple

from crawlscope.crawler.fetcher import FetchFunc
from crawlscope.crawler.link_extractor import normalize_url
from crawlscope.crawler.link_filter import DEFAULT_EXCLUDED_EXTENSIONS, LinkFilter
from crawlscope.crawler.models import CrawlFailure, CrawlReport, FetchResult, PageData
from crawlscope.crawler.visited import VisitedSet

__all__: Sequence[str] = ("PageHook", "Spiderling")

#: called with every successfully fetched page; the indexing extension point
PageHook = Callable[[PageData], Optional[Awaitable[None]]]

_WorkItem = Tuple[str, int]

logger = logging.getLogger("CrawlScope")
visited_logger = logging.getLogger("CrawlScope.visited")


class Spiderling:
    """
    Crawls from ``base_url``, following links that match ``scope_pattern``.

    Pending URLs live in an explicit work queue of ``(url, depth)`` items
    consumed by ``concurrency`` workers. With ``order="depth"`` the queue is a
    stack and children are pushed in reverse, so a single worker explores the
    first link of a page completely before its next sibling. A URL is claimed
    in the visited set when a worker takes it off the queue and before it is
    fetched; an item whose URL was claimed meanwhile is dropped.
    """

    def __init__(
        self,
        base_url: str,
        scope_pattern: str,
        fetch: FetchFunc,
        *,
        literal: bool = False,
        excluded_extensions: Sequence[str] = DEFAULT_EXCLUDED_EXTENSIONS,
        order: str = "depth",
        concurrency: int = 1,
        timeout: Optional[float] = None,
        max_depth: Optional[int] = None,
        max_pages: Optional[int] = None,
        on_page: Optional[PageHook] = None,
    ) -> None:
        if order not in ("depth", "breadth"):
            raise ValueError(f"order must be 'depth' or 'breadth', got {order!r}")
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._base_url = base_url
        self._scope_pattern = scope_pattern
        self._literal = literal
        self._excluded_extensions = tuple(excluded_extensions)
        self._filter = LinkFilter(scope_pattern, literal=literal, excluded_extensions=excluded_extensions)
        self.fetch = fetch
        self.order = order
        self.concurrency = concurrency
        self.timeout = timeout
        self.max_depth = max_depth
        self.max_pages = max_pages
        self.on_page = on_page
        self._visited = VisitedSet()
        self._failures: List[CrawlFailure] = []
        self._pages_fetched = 0
        self._running = False

    # Accessors ---------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        self._ensure_idle()
        self._base_url = value

    @property
    def scope_pattern(self) -> str:
        return self._scope_pattern

    @scope_pattern.setter
    def scope_pattern(self, value: str) -> None:
        self._ensure_idle()
        self._filter = LinkFilter(
            value, literal=self._literal, excluded_extensions=self._excluded_extensions
        )
        self._scope_pattern = value

    @property
    def visited(self) -> FrozenSet[str]:
        """Read-only view of the URLs claimed so far."""
        return self._visited.snapshot()

    @property
    def failures(self) -> List[CrawlFailure]:
        return list(self._failures)

    @property
    def running(self) -> bool:
        return self._running

    def _ensure_idle(self) -> None:
        if self._running:
            raise RuntimeError("cannot change crawl parameters while a run is in progress")

    # Entry points ------------------------------------------------------------

    async def run(self) -> CrawlReport:
        """Crawl from the seed URL. Never raises; failures end up in the report."""
        seed = normalize_url(self._base_url)
        report = CrawlReport(base_url=seed)
        logger.info("Started crawl: %s (scope %r)", seed, self._scope_pattern)
        start = time.monotonic()
        try:
            await self.crawl(seed)
        except Exception:
            logger.exception("Crawl from %s aborted", seed)
            report.completed = False
        report.duration = time.monotonic() - start
        report.visited = self._visited.in_order()
        report.failures = self.failures
        report.pages_fetched = self._pages_fetched
        logger.info(
            "Finished crawl: %d visited, %d fetched, %d failed in %.2f s",
            len(report.visited),
            report.pages_fetched,
            len(report.failures),
            report.duration,
        )
        return report

    async def crawl(self, url: str) -> None:
        """Visit *url* and everything eligible reachable from it."""
        self._ensure_idle()
        self._running = True
        try:
            root = normalize_url(url)
            queue: asyncio.Queue[_WorkItem] = (
                asyncio.LifoQueue() if self.order == "depth" else asyncio.Queue()
            )
            queue.put_nowait((root, 0))
            workers = [asyncio.create_task(self._worker(queue)) for _ in range(self.concurrency)]
            try:
                # join() waits for queued and in-flight items alike
                await queue.join()
            finally:
                for w in workers:
                    w.cancel()
                await asyncio.gather(*workers, return_exceptions=True)
        finally:
            self._running = False

    # Internals ---------------------------------------------------------------

    def _claim(self, url: str) -> bool:
        if self.max_pages is not None and len(self._visited) >= self.max_pages:
            return False
        if not self._visited.add_if_absent(url):
            return False
        visited_logger.debug(url)
        return True

    async def _worker(self, queue: asyncio.Queue[_WorkItem]) -> None:
        while True:
            url, depth = await queue.get()
            try:
                if not self._claim(url):
                    continue
                children = await self._visit(url, depth)
                # reversed on a stack keeps document order for depth-first
                for child in reversed(children) if self.order == "depth" else children:
                    queue.put_nowait((child, depth + 1))
            except Exception:
                logger.exception("Unexpected error while expanding %s", url)
                self._failures.append(CrawlFailure(url, "internal error"))
            finally:
                queue.task_done()

    async def _visit(self, url: str, depth: int) -> List[str]:
        logger.info("Crawling: %s", url)
        result = await self._fetch(url)
        if not result.ok:
            assert result.error is not None
            logger.warning("Failed %s: %s", url, result.error.reason)
            self._failures.append(CrawlFailure(url, result.error.reason))
            return []
        self._pages_fetched += 1
        if self.on_page is not None and result.page is not None:
            outcome = self.on_page(result.page)
            if asyncio.iscoroutine(outcome):
                await outcome
        if self.max_depth is not None and depth >= self.max_depth:
            return []
        children: List[str] = []
        for link in result.links:
            link = normalize_url(link)
            if not self._filter.is_eligible(link, self._visited):
                logger.debug("Skipping %s", link)
                continue
            children.append(link)
        return children

    async def _fetch(self, url: str) -> FetchResult:
        try:
            if self.timeout is None:
                return await self.fetch(url)
            return await asyncio.wait_for(self.fetch(url), timeout=self.timeout)
        except asyncio.TimeoutError:
            return FetchResult.failure(url, f"timed out after {self.timeout} s")
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            return FetchResult.failure(url, f"{type(exc).__name__}: {exc}")
