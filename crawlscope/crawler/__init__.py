"""crawlscope.crawler: visited set, link filter, fetcher and the traversal engine."""
