# File: crawlscope/engine.py
"""crawlscope.engine: Orchestration layer, собирает краулер из конфигурации и запускает обход."""

from __future__ import annotations

from typing import Optional

from crawlscope.config import CrawlConfig
from crawlscope.crawler.crawler import PageHook, Spiderling
from crawlscope.crawler.fetcher import FetchFunc, HttpFetcher
from crawlscope.crawler.models import CrawlReport
from crawlscope.logger import enable_visited_log

__all__ = ["build_spiderling", "start_crawl"]


def build_spiderling(
    config: CrawlConfig, fetch: FetchFunc, on_page: Optional[PageHook] = None
) -> Spiderling:
    """Создаёт Spiderling с параметрами из конфигурации и заданным fetch-коллаборатором."""
    return Spiderling(
        config.base_url,
        config.scope_pattern,
        fetch,
        literal=config.literal,
        excluded_extensions=config.excluded_extensions,
        order=config.order,
        concurrency=config.concurrency,
        timeout=config.timeout,
        max_depth=config.max_depth,
        max_pages=config.max_pages,
        on_page=on_page,
    )


async def start_crawl(
    config: CrawlConfig,
    fetch: Optional[FetchFunc] = None,
    on_page: Optional[PageHook] = None,
) -> CrawlReport:
    """
    Запускает обход и возвращает отчёт.

    Без ``fetch`` используется HttpFetcher, сессия aiohttp живёт ровно один запуск.
    """
    enable_visited_log(config.visited_log)
    try:
        if fetch is not None:
            return await build_spiderling(config, fetch, on_page).run()
        async with HttpFetcher(
            timeout=config.timeout,
            user_agent=config.user_agent,
            retry_times=config.retry_times,
        ) as fetcher:
            return await build_spiderling(config, fetcher, on_page).run()
    finally:
        if config.visited_log is not None:
            enable_visited_log(None)

