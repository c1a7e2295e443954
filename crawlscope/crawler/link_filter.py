# crawlscope/crawler/link_filter.py
"""
Scope and file-type filtering for discovered links.

A link is followed only when it is inside the crawl boundary described by the
scope pattern and does not point at a known non-HTML download.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Collection, Container, Sequence, Tuple

__all__: Sequence[str] = (
    "DEFAULT_EXCLUDED_EXTENSIONS",
    "InvalidScopePattern",
    "LinkFilter",
    "is_crawlable",
    "is_in_scope",
)

DEFAULT_EXCLUDED_EXTENSIONS: Tuple[str, ...] = (".py", ".zip", ".xls", ".pdf")


class InvalidScopePattern(ValueError):
    """Scope fragment does not compile as part of a regular expression."""


# inline flags such as "(?i)" are only legal at the very start of a pattern
_LEADING_FLAGS = re.compile(r"(?:\(\?[aiLmsux]+\))+")


@lru_cache(maxsize=128)
def _scope_regex(scope_pattern: str, literal: bool) -> re.Pattern[str]:
    flags = ""
    fragment = re.escape(scope_pattern) if literal else scope_pattern
    if not literal:
        m = _LEADING_FLAGS.match(fragment)
        if m:
            flags, fragment = m.group(0), fragment[m.end():]
    try:
        return re.compile(f"{flags}.*(?:{fragment}).*")
    except re.error as exc:
        raise InvalidScopePattern(f"invalid scope pattern {scope_pattern!r}: {exc}") from exc


def is_in_scope(url: str, scope_pattern: str, *, literal: bool = False) -> bool:
    """
    Return True if *url* contains a match for *scope_pattern*.

    The fragment is treated as a regular expression unless *literal* is set,
    so callers passing plain text with metacharacters ("." in host names is
    harmless, "?" or "+" are not) should use ``literal=True``.
    """
    return _scope_regex(scope_pattern, literal).fullmatch(url) is not None


def is_crawlable(url: str, excluded: Collection[str] = DEFAULT_EXCLUDED_EXTENSIONS) -> bool:
    """Return False for URLs ending in one of the *excluded* extensions."""
    return not url.endswith(tuple(excluded))


class LinkFilter:
    """Binds a scope pattern and an extension denylist into one eligibility test."""

    def __init__(
        self,
        scope_pattern: str,
        *,
        literal: bool = False,
        excluded_extensions: Collection[str] = DEFAULT_EXCLUDED_EXTENSIONS,
    ) -> None:
        self.scope_pattern = scope_pattern
        self.literal = literal
        self.excluded_extensions = tuple(ext.lower() for ext in excluded_extensions)
        # fail early on a broken fragment instead of on the first link
        _scope_regex(scope_pattern, literal)

    def in_scope(self, url: str) -> bool:
        return is_in_scope(url, self.scope_pattern, literal=self.literal)

    def crawlable(self, url: str) -> bool:
        return is_crawlable(url, self.excluded_extensions)

    def accepts(self, url: str) -> bool:
        """Scope and extension checks only, without the visited lookup."""
        return self.in_scope(url) and self.crawlable(url)

    def is_eligible(self, url: str, visited: Container[str]) -> bool:
        """A link is eligible iff unvisited, in scope and crawlable."""
        return url not in visited and self.accepts(url)
