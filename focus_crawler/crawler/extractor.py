# focus_crawler/crawler/extractor.py
"""
Content extractor adapter: renderer call under a bounded timeout, then
mapping of the raw markup into an immutable :class:`PageRecord`.
"""
from __future__ import annotations

import asyncio

from focus_crawler.crawler.fetcher import Renderer
from focus_crawler.crawler.models import CanonicalURL, PageRecord
from focus_crawler.exceptions import ExtractionError, FetchError, FetchTimeout
from focus_crawler.parser.html_parser import parse_html


class ContentExtractor:
    """Turns a canonical URL into a :class:`PageRecord` or raises :class:`FetchError`."""

    def __init__(self, renderer: Renderer, timeout: float) -> None:
        self.renderer = renderer
        self.timeout = timeout

    async def extract(self, url: CanonicalURL) -> PageRecord:
        try:
            raw = await asyncio.wait_for(self.renderer.render(url), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise FetchTimeout(url, self.timeout) from exc
        except FetchError:
            raise
        except (OSError, ValueError) as exc:
            raise FetchError(url, exc) from exc

        try:
            parsed = parse_html(raw.html, raw.url or url)
        except Exception as exc:
            raise ExtractionError(url, exc) from exc

        return PageRecord(
            url=url,
            title=parsed.title,
            headings=tuple(parsed.headings),
            paragraphs=tuple(parsed.paragraphs),
            tables=tuple(tuple(tuple(row) for row in table) for table in parsed.tables),
            outbound_links=frozenset(parsed.links),
            link_texts=parsed.link_texts,
        )
