# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections import Counter
from typing import Callable, Dict, Optional

import pytest

from focus_crawler.config import CrawlerConfig
from focus_crawler.crawler.models import RawPage
from focus_crawler.exceptions import FetchError
from focus_crawler.logger import configure

SEED = "https://example.edu/"


def links_html(*hrefs: str, body: str = "") -> str:
    """Minimal page linking to *hrefs*."""
    anchors = "".join(f'<a href="{h}">{h}</a>' for h in hrefs)
    return f"<html><body>{body}{anchors}</body></html>"


class FakeRenderer:
    """
    In-memory renderer: serves HTML from a dict keyed by canonical URL.

    Unknown URLs raise FetchError like a 404 would. Tracks call counts
    and the peak number of simultaneous renders.
    """

    def __init__(
        self,
        pages: Dict[str, str],
        *,
        failures: Optional[Dict[str, BaseException]] = None,
        delays: Optional[Dict[str, float]] = None,
        default_delay: float = 0.0,
    ) -> None:
        self.pages = pages
        self.failures = failures or {}
        self.delays = delays or {}
        self.default_delay = default_delay
        self.calls: Counter[str] = Counter()
        self.active = 0
        self.max_active = 0

    async def render(self, url: str) -> RawPage:
        self.calls[url] += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(url, self.default_delay))
            if url in self.failures:
                raise self.failures[url]
            if url not in self.pages:
                raise FetchError(url, "HTTP 404")
            return RawPage(url=url, html=self.pages[url], status=200)
        finally:
            self.active -= 1


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests swap stderr; give the project logger a fresh handler afterwards."""
    yield
    configure(level="INFO")


@pytest.fixture()
def make_config() -> Callable[..., CrawlerConfig]:
    """Factory for a CrawlerConfig rooted at https://example.edu/."""

    def _make(**overrides) -> CrawlerConfig:
        data = {
            "seed_url": SEED,
            "max_depth": 2,
            "concurrency": 4,
            "fetch_timeout_ms": 2000,
            "retry_times": 0,
        }
        data.update(overrides)
        return CrawlerConfig(**data)

    return _make
