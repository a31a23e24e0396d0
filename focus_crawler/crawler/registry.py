# focus_crawler/crawler/registry.py
"""
Visited registry: exactly-once admission of canonical URLs.
"""
from __future__ import annotations

import threading
from typing import Iterator, Set

from focus_crawler.crawler.models import CanonicalURL


class VisitedRegistry:
    """
    Set of URLs already admitted during one crawl.

    :meth:`try_admit` is the only way to add a URL and the only dedup check
    callers should use; a separate "contains then add" would race.
    """

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def try_admit(self, url: CanonicalURL) -> bool:
        """Record *url* and return True, or return False if it was already there."""
        with self._lock:
            if url in self._seen:
                return False
            self._seen.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        return url in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(sorted(self._seen))
