# crawlscope/crawler/link_extractor.py
"""
Anchor link extraction and URL normalization for CrawlScope.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from crawlscope.crawler.models import PageData


def normalize_url(url: str) -> str:
    """Visited-set key for *url*: the whole string lowercased and stripped."""
    return url.strip().lower()


def extract_links(page: PageData) -> List[str]:
    """
    Return absolute, lowercased targets of every ``<a href>`` in *page*.

    Targets that do not resolve to an http(s) URL (mailto:, javascript:,
    empty hrefs) are skipped. Fragments are dropped. Order follows the
    document and duplicates are kept; the visited set deals with them.
    """
    soup = BeautifulSoup(page.content, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw:
            continue
        absolute, _ = urldefrag(urljoin(page.url, raw))
        if urlparse(absolute).scheme not in ("http", "https"):
            continue
        links.append(normalize_url(absolute))
    return links
