# crawlscope/crawler/models.py
"""
Data models for the CrawlScope crawler.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


class CrawlScopeError(Exception):
    """Base class for crawler errors."""


class FetchError(CrawlScopeError):
    """Fetching or parsing a single URL failed."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


@dataclass(slots=True)
class PageData:
    """Holds the URL, decoded body and HTTP status of a fetched page."""

    url: str
    content: str
    status: int = 200


@dataclass(slots=True)
class FetchResult:
    """Outcome of one fetch attempt: either a page with its links or an error."""

    url: str
    page: Optional[PageData] = None
    links: List[str] = field(default_factory=list)
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, page: PageData, links: List[str]) -> FetchResult:
        return cls(url=page.url, page=page, links=links)

    @classmethod
    def failure(cls, url: str, reason: str) -> FetchResult:
        return cls(url=url, error=FetchError(url, reason))


@dataclass(slots=True)
class CrawlFailure:
    url: str
    reason: str


@dataclass(slots=True)
class CrawlReport:
    """Summary of one run, returned by :meth:`Spiderling.run`."""

    base_url: str
    visited: List[str] = field(default_factory=list)
    failures: List[CrawlFailure] = field(default_factory=list)
    pages_fetched: int = 0
    duration: float = 0.0
    completed: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
