# File: focus_crawler/exceptions.py
"""Иерархия исключений FocusCrawler."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "CrawlerError",
    "ConfigurationError",
    "InvalidURLError",
    "FetchError",
    "FetchTimeout",
    "ExtractionError",
]


class CrawlerError(Exception):
    """Base class for all FocusCrawler errors."""


class ConfigurationError(CrawlerError):
    """Missing or invalid configuration; the crawl never starts."""


class InvalidURLError(CrawlerError, ValueError):
    """A string could not be parsed as an absolute http(s) URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid URL {url!r}: {reason}")
        self.url = url
        self.reason = reason


class FetchError(CrawlerError):
    """The renderer failed to deliver a page. Non-fatal for the crawl."""

    def __init__(self, url: str, cause: object) -> None:
        super().__init__(f"Failed to fetch {url}: {cause}")
        self.url = url
        self.cause = cause


class FetchTimeout(FetchError):
    """Navigation did not finish within the fetch timeout."""

    def __init__(self, url: str, timeout: Optional[float] = None) -> None:
        cause = f"timed out after {timeout:.1f} s" if timeout is not None else "timed out"
        super().__init__(url, cause)
        self.timeout = timeout


class ExtractionError(FetchError):
    """The page was fetched but its content could not be parsed."""
