# File: focus_crawler/aggregator.py
"""focus_crawler.aggregator: сбор записей страниц в итоговый результат обхода."""

from __future__ import annotations

import json
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, TypedDict

from focus_crawler.crawler.models import PageRecord
from focus_crawler.exceptions import FetchError


class PageInfo(TypedDict):
    """JSON-представление одной страницы."""

    url: str
    title: str
    headings: List[str]
    paragraphs: List[str]
    tables: List[List[List[str]]]


@dataclass(frozen=True, slots=True)
class CrawlFailure:
    """URL, который не удалось загрузить или разобрать."""

    url: str
    depth: int
    error: str

    @classmethod
    def from_exception(cls, url: str, depth: int, exc: BaseException) -> CrawlFailure:
        cause = exc.cause if isinstance(exc, FetchError) else exc
        return cls(url=url, depth=depth, error=f"{type(exc).__name__}: {cause}")


class CrawlResult(Mapping):
    """Неизменяемое отображение CanonicalURL -> PageRecord в порядке добавления."""

    def __init__(
        self,
        pages: Dict[str, PageRecord],
        failures: Optional[List[CrawlFailure]] = None,
        *,
        cancelled: bool = False,
    ) -> None:
        self._pages = dict(pages)
        self.failures: tuple[CrawlFailure, ...] = tuple(failures or ())
        self.cancelled = cancelled

    def __getitem__(self, url: str) -> PageRecord:
        return self._pages[url]

    def __iter__(self) -> Iterator[str]:
        return iter(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __repr__(self) -> str:
        return f"CrawlResult(pages={len(self._pages)}, failures={len(self.failures)})"

    @property
    def urls(self) -> List[str]:
        return list(self._pages)

    def to_records(self) -> List[PageInfo]:
        """Список словарей {url, title, headings, paragraphs, tables}."""
        return [PageInfo(**page.to_dict()) for page in self._pages.values()]  # type: ignore[typeddict-item]

    def json(self, *, pretty: bool = False) -> str:
        """JSON-массив записей страниц."""
        return json.dumps(self.to_records(), ensure_ascii=False, indent=2 if pretty else None)


class ResultAggregator:
    """
    Потокобезопасный накопитель результатов одного обхода.

    Повторная запись того же URL игнорируется; до ``finalize()`` наружу
    виден только счётчик.
    """

    def __init__(self) -> None:
        self._pages: Dict[str, PageRecord] = {}
        self._failures: List[CrawlFailure] = []
        self._lock = threading.Lock()
        self._result: Optional[CrawlResult] = None

    def record(self, page: PageRecord) -> bool:
        """Сохраняет запись; возвращает False, если URL уже был записан."""
        with self._lock:
            self._check_open()
            if page.url in self._pages:
                return False
            self._pages[page.url] = page
            return True

    def record_failure(self, failure: CrawlFailure) -> None:
        with self._lock:
            self._check_open()
            self._failures.append(failure)

    @property
    def count(self) -> int:
        return len(self._pages)

    @property
    def failure_count(self) -> int:
        return len(self._failures)

    def finalize(self, *, cancelled: bool = False) -> CrawlResult:
        """Закрывает накопитель и возвращает итоговый CrawlResult (повторный вызов вернёт тот же объект)."""
        with self._lock:
            if self._result is None:
                self._result = CrawlResult(self._pages, self._failures, cancelled=cancelled)
            return self._result

    def _check_open(self) -> None:
        if self._result is not None:
            raise RuntimeError("aggregator already finalized")


def summary(result: CrawlResult) -> Dict[str, Any]:
    """Короткая сводка для логов и HTML-отчёта."""
    return {
        "pages": len(result),
        "failures": len(result.failures),
        "cancelled": result.cancelled,
    }


__all__ = [
    "PageInfo",
    "CrawlFailure",
    "CrawlResult",
    "ResultAggregator",
    "summary",
]
