# crawlscope/__init__.py
"""
CrawlScope package initializer.
Defines package version and exposes the crawler API.
"""
__version__ = "0.1.0"

from crawlscope.crawler.crawler import Spiderling
from crawlscope.crawler.link_filter import LinkFilter, is_crawlable, is_in_scope
from crawlscope.crawler.models import CrawlReport, FetchError, FetchResult, PageData
from crawlscope.crawler.visited import VisitedSet

__all__ = [
    "__version__",
    "CrawlReport",
    "FetchError",
    "FetchResult",
    "LinkFilter",
    "PageData",
    "Spiderling",
    "VisitedSet",
    "is_crawlable",
    "is_in_scope",
]
