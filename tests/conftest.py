# File: tests/conftest.py
import asyncio
from typing import Dict, Iterable, List, Optional

import pytest

from crawlscope.config import CrawlConfig
from crawlscope.crawler.models import FetchResult, PageData


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


class GraphFetcher:
    """
    In-memory fetch collaborator backed by a ``{url: [links]}`` mapping.

    URLs missing from the graph answer with a 404 failure, ``failing`` URLs
    with a 500 failure, ``raising`` URLs raise, ``slow`` URLs sleep first.
    """

    def __init__(
        self,
        graph: Dict[str, List[str]],
        *,
        failing: Iterable[str] = (),
        raising: Iterable[str] = (),
        slow: Optional[Dict[str, float]] = None,
        delay: float = 0.0,
    ) -> None:
        self.graph = graph
        self.failing = set(failing)
        self.raising = set(raising)
        self.slow = slow or {}
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, url: str) -> FetchResult:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            pause = self.slow.get(url, self.delay)
            if pause:
                await asyncio.sleep(pause)
            else:
                await asyncio.sleep(0)
            if url in self.raising:
                raise ConnectionError(f"connection reset by {url}")
            if url in self.failing:
                return FetchResult.failure(url, "HTTP 500")
            if url not in self.graph:
                return FetchResult.failure(url, "HTTP 404")
            return FetchResult.success(PageData(url, "<html></html>"), list(self.graph[url]))
        finally:
            self.in_flight -= 1


@pytest.fixture()
def make_fetcher():
    """Factory for :class:`GraphFetcher` instances."""
    return GraphFetcher


@pytest.fixture()
def basic_config() -> CrawlConfig:
    """
    Return a basic valid CrawlConfig for engine tests.
    """
    return CrawlConfig(
        base_url="http://example.com",
        scope_pattern="example.com",
        concurrency=1,
        timeout=2.0,
        user_agent="TestAgent/1.0",
    )


@pytest.fixture()
def mock_page_data() -> PageData:
    """
    Provide a simple PageData instance with HTML content.
    """
    html = (
        '<html><body>'
        '<a href="/Link1">L1</a>'
        '<a href="http://External.com/About#team">X</a>'
        '<a href="mailto:me@example.com">mail</a>'
        '<a href="javascript:void(0)">js</a>'
        '<a href="">empty</a>'
        '<a name="no-href">anchor</a>'
        '</body></html>'
    )
    return PageData(url="http://example.com/docs/", content=html)
