# === FILE: focus_crawler/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from collections import Counter
from typing import Dict, List, Optional

from focus_crawler.aggregator import CrawlFailure, CrawlResult, ResultAggregator
from focus_crawler.crawler.extractor import ContentExtractor
from focus_crawler.crawler.fetcher import HttpRenderer, Renderer
from focus_crawler.crawler.models import FrontierEntry, PageRecord
from focus_crawler.crawler.policy import (
    KeywordMatcher,
    LinkPolicy,
    PolicyConfig,
    PolicyContext,
    RelevanceFn,
)
from focus_crawler.crawler.registry import VisitedRegistry
from focus_crawler.crawler.urls import canonicalize
from focus_crawler.exceptions import FetchError, InvalidURLError

__all__ = ("AsyncCrawler", "build_policy")


def build_policy(config, relevance: Optional[RelevanceFn] = None) -> LinkPolicy:
    """Link policy described by *config*; *relevance* replaces the keyword matcher."""
    matcher = relevance or KeywordMatcher(config.relevance_keywords, config.relevance_mode)
    return LinkPolicy.from_config(
        PolicyConfig(
            base_domain=config.base_domain,
            excluded_extensions=frozenset(config.excluded_extensions),
            excluded_host_patterns=frozenset(config.excluded_host_patterns),
            relevance_predicate=matcher,
        )
    )


class AsyncCrawler:
    """
    Обход в ширину с ограничением глубины: очередь фронтира и пул воркеров.

    The seed is admitted at depth 0 without consulting the link policy.
    Every discovered link is canonicalized, checked against the policy and
    the depth limit, and admitted through the visited registry before it is
    queued for the next level. Levels run one after another through the
    same bounded pool, so every URL is admitted at its shortest depth.
    Per-URL failures are recorded and never stop the run. The crawl ends
    when a level discovers nothing new; :meth:`cancel` stops dispatching new
    entries and the partial result is still returned.
    """

    def __init__(
        self,
        config,
        renderer: Optional[Renderer] = None,
        *,
        relevance: Optional[RelevanceFn] = None,
    ) -> None:
        self.config = config
        self.seed = canonicalize(str(config.seed_url))
        self.concurrency: int = config.concurrency
        self.policy = build_policy(config, relevance)
        self.registry = VisitedRegistry()
        self.aggregator = ResultAggregator()
        self.skipped: Counter[str] = Counter()
        self.logger = logging.getLogger("FocusCrawler")
        self._own_renderer: Optional[HttpRenderer] = None
        if renderer is None:
            renderer = self._own_renderer = HttpRenderer(
                timeout=config.fetch_timeout_ms / 1000,
                user_agent=config.user_agent,
                retry_times=config.retry_times,
            )
        self.extractor = ContentExtractor(renderer, timeout=config.fetch_timeout_ms / 1000)
        self._stop = asyncio.Event()
        self._in_flight = 0
        self._queue: Optional[asyncio.Queue[FrontierEntry]] = None
        self._next_level: List[FrontierEntry] = []

    async def __aenter__(self) -> AsyncCrawler:
        if self._own_renderer is not None:
            await self._own_renderer.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._own_renderer is not None:
            await self._own_renderer.__aexit__(exc_type, exc, tb)

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        """Stop dispatching new frontier entries; in-flight fetches drain."""
        if not self._stop.is_set():
            self.logger.warning("Обход остановлен (%s): новые URL не отправляются", reason)
            self._stop.set()

    def progress(self) -> Dict[str, int]:
        """Counters safe to read while the crawl runs."""
        queued = self._queue.qsize() if self._queue is not None else 0
        return {
            "admitted": len(self.registry),
            "pages": self.aggregator.count,
            "failures": self.aggregator.failure_count,
            "in_flight": self._in_flight,
            "queued": queued + len(self._next_level),
        }

    async def crawl(self) -> CrawlResult:
        self.logger.info(
            "Старт обхода: %s (max_depth=%d, workers=%d)",
            self.seed,
            self.config.max_depth,
            self.concurrency,
        )
        start = time.monotonic()
        self.registry.try_admit(self.seed)
        level: List[FrontierEntry] = [FrontierEntry(self.seed, 0)]

        timer = None
        if getattr(self.config, "crawl_timeout", None):
            timer = asyncio.get_running_loop().call_later(
                self.config.crawl_timeout, self.cancel, "crawl timeout"
            )
        try:
            # depth d finishes, in-flight pages included, before depth d+1 is dispatched
            while level and not self._stop.is_set():
                level = await self._crawl_level(level)
            if level:
                self.logger.debug("Dropped %d queued URL after cancel", len(level))
        finally:
            if timer is not None:
                timer.cancel()
            self._next_level = []

        result = self.aggregator.finalize(cancelled=self.cancelled)
        duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц, %d ошибок за %.2f с", len(result), len(result.failures), duration
        )
        if self.skipped:
            self.logger.info(
                "Пропущено ссылок: %s", ", ".join(f"{k}={v}" for k, v in sorted(self.skipped.items()))
            )
        return result

    async def _crawl_level(self, entries: List[FrontierEntry]) -> List[FrontierEntry]:
        """Drain one depth level through the worker pool; return the next level."""
        self.logger.debug("Depth %d: %d URL", entries[0].depth, len(entries))
        queue: asyncio.Queue[FrontierEntry] = asyncio.Queue()
        for entry in entries:
            queue.put_nowait(entry)
        self._queue = queue
        self._next_level = []

        workers = [
            asyncio.create_task(self._worker(queue), name=f"crawler-worker-{i}")
            for i in range(min(self.concurrency, len(entries)))
        ]
        try:
            await queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            self._queue = None
        return self._next_level

    async def _worker(self, queue: asyncio.Queue[FrontierEntry]) -> None:
        while True:
            entry = await queue.get()
            try:
                if self._stop.is_set():
                    self.logger.debug("Skipping %s: crawl cancelled", entry.url)
                    continue
                self._in_flight += 1
                try:
                    await self._process(entry)
                finally:
                    self._in_flight -= 1
            except Exception as exc:
                self.logger.exception("Unexpected error while processing %s", entry.url)
                self.aggregator.record_failure(CrawlFailure.from_exception(entry.url, entry.depth, exc))
            finally:
                queue.task_done()

    async def _process(self, entry: FrontierEntry) -> None:
        self.logger.info("Navigating to: %s (depth %d)", entry.url, entry.depth)
        try:
            page = await self.extractor.extract(entry.url)
        except FetchError as exc:
            self.logger.warning("Error at %s: %s", entry.url, exc.cause)
            self.aggregator.record_failure(CrawlFailure.from_exception(entry.url, entry.depth, exc))
            return

        if self._page_limit_reached():
            self.logger.debug("Page limit reached, dropping %s", entry.url)
            return
        self.aggregator.record(page)
        if self._page_limit_reached():
            self.cancel("max_pages reached")

        if self._stop.is_set():
            return
        if entry.depth >= self.config.max_depth:
            self.skipped["depth"] += len(page.outbound_links)
            self.logger.debug("Depth limit at %s: %d links not followed", entry.url, len(page.outbound_links))
            return

        children = self._expand(page, entry.depth + 1)
        self._next_level.extend(children)
        self.logger.info("Found %d valid links to crawl from %s", len(children), entry.url)

    def _expand(self, page: PageRecord, depth: int) -> List[FrontierEntry]:
        children: List[FrontierEntry] = []
        for link in sorted(page.outbound_links):
            child = self._admit(link, page, depth)
            if child is not None:
                children.append(child)
        return children

    def _admit(self, link: str, page: PageRecord, depth: int) -> Optional[FrontierEntry]:
        try:
            url = canonicalize(link, base=page.url)
        except InvalidURLError as exc:
            self.skipped["invalid"] += 1
            self.logger.debug("Skipping %s: %s", link, exc.reason)
            return None
        reason = self.policy.rejected_by(url, PolicyContext(page.anchor_text(link), page.url))
        if reason is not None:
            self.skipped[reason] += 1
            self.logger.debug("Skipping %s: rejected by %s filter", url, reason)
            return None
        if depth > self.config.max_depth:
            self.skipped["depth"] += 1
            return None
        if not self.registry.try_admit(url):
            self.skipped["visited"] += 1
            self.logger.debug("Skipping %s: already visited", url)
            return None
        self.logger.debug("Admitted %s at depth %d", url, depth)
        return FrontierEntry(url, depth)

    def _page_limit_reached(self) -> bool:
        limit = getattr(self.config, "max_pages", None)
        return limit is not None and self.aggregator.count >= limit
