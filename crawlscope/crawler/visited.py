# crawlscope/crawler/visited.py
"""
Visited-URL bookkeeping for a single crawl run.
"""
from __future__ import annotations

import threading
from typing import FrozenSet, Iterator, List, Set


class VisitedSet:
    """
    Grow-only set of normalized URLs.

    :meth:`add_if_absent` is the only place a URL is claimed during a run:
    the membership test and the insert happen under one lock, so two workers
    can never both see the same URL as new.
    """

    def __init__(self) -> None:
        self._urls: Set[str] = set()
        self._order: List[str] = []
        self._lock = threading.Lock()

    def has_visited(self, url: str) -> bool:
        return url in self._urls

    def mark_visited(self, url: str) -> None:
        """Mark *url* as visited; marking it again is a no-op."""
        self.add_if_absent(url)

    def add_if_absent(self, url: str) -> bool:
        """Insert *url* and return True if it was not present before."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            self._order.append(url)
            return True

    def snapshot(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._urls)

    def in_order(self) -> List[str]:
        """URLs in the order they were first claimed."""
        with self._lock:
            return list(self._order)

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self.in_order())

    def __repr__(self) -> str:
        return f"VisitedSet(size={len(self._urls)})"
