# focus_crawler/crawler/fetcher.py
"""
Fetcher module: the page renderer interface and its default HTTP
implementation with retry/backoff and per-request timeout.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Optional, Protocol, Sequence, runtime_checkable

from aiohttp import ClientError, ClientSession, ClientTimeout

from focus_crawler.crawler.models import RawPage
from focus_crawler.exceptions import FetchError, FetchTimeout

__all__ = ("Renderer", "HttpRenderer", "RETRY_STATUS")

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
_HTML_TYPES = ("text/html", "application/xhtml+xml")


@runtime_checkable
class Renderer(Protocol):
    """Anything that can turn a URL into page markup or raise :class:`FetchError`."""

    async def render(self, url: str) -> RawPage: ...


class _RetryableStatus(ClientError):
    def __init__(self, status: int) -> None:
        super().__init__(f"retryable status {status}")
        self.status = status


class HttpRenderer:
    """Plain HTTP renderer built on one shared aiohttp session (no JavaScript)."""

    def __init__(
        self,
        *,
        timeout: float = 60.0,
        user_agent: str = "FocusCrawler/1.0",
        retry_times: int = 2,
        retry_status: Sequence[int] = RETRY_STATUS,
        max_backoff: float = 60.0,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.retry_times = retry_times
        self._retry_status = retry_status
        self.max_backoff = max_backoff
        self.session = session
        self._owns_session = session is None
        self.logger = logging.getLogger("FocusCrawler")

    async def __aenter__(self) -> HttpRenderer:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def render(self, url: str) -> RawPage:
        """
        Fetch *url* and return its HTML.

        Raises FetchTimeout on timeout, FetchError on network errors,
        non-2xx responses and non-HTML content.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        attempts = 0
        while True:
            try:
                async with self.session.get(url) as resp:
                    if resp.status in self._retry_status:
                        raise _RetryableStatus(resp.status)
                    if not 200 <= resp.status < 300:
                        raise FetchError(url, f"HTTP {resp.status}")
                    mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                    if mime and mime not in _HTML_TYPES:
                        raise FetchError(url, f"unsupported content type {mime}")
                    text = await resp.text(errors="replace")
                    return RawPage(url=str(resp.url), html=text, status=resp.status)
            except asyncio.TimeoutError as exc:
                # no retry on timeout
                raise FetchTimeout(url, self.timeout) from exc
            except ClientError as exc:
                attempts += 1
                if attempts > self.retry_times:
                    raise FetchError(url, exc) from exc
                backoff = min(self.max_backoff, 2**attempts + random.random())
                self.logger.debug("Retry %d/%d for %s after %.2f s", attempts, self.retry_times, url, backoff)
                await asyncio.sleep(backoff)
