# File: focus_crawler/engine.py
"""focus_crawler.engine: запуск обхода по готовой конфигурации."""

from __future__ import annotations

from typing import Optional

from focus_crawler.aggregator import CrawlResult
from focus_crawler.config import CrawlerConfig
from focus_crawler.crawler.crawler import AsyncCrawler
from focus_crawler.crawler.fetcher import Renderer
from focus_crawler.crawler.policy import RelevanceFn
from focus_crawler.logger import logger

__all__ = ["start_crawl"]


async def start_crawl(
    config: CrawlerConfig,
    renderer: Optional[Renderer] = None,
    *,
    relevance: Optional[RelevanceFn] = None,
) -> CrawlResult:
    """
    Запускает AsyncCrawler в контексте и возвращает финальный CrawlResult.

    Parameters
    ----------
    config : CrawlerConfig
        Конфигурация обхода.
    renderer : Renderer, optional
        Внешний рендерер страниц; по умолчанию HttpRenderer на aiohttp.
    relevance : callable, optional
        Предикат релевантности ``(url, anchor_text) -> bool`` вместо
        сопоставления по ключевым словам.

    Returns
    -------
    CrawlResult
        Записи страниц по каноническим URL (при отмене частичные).
    """
    logger.info("Starting crawl of %s (domain %s)", config.seed_url, config.base_domain)
    async with AsyncCrawler(config, renderer, relevance=relevance) as crawler:
        return await crawler.crawl()
