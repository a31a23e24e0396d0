import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from focus_crawler.crawler.registry import VisitedRegistry


def test_try_admit_is_exactly_once():
    registry = VisitedRegistry()
    assert registry.try_admit("https://example.edu/")
    assert not registry.try_admit("https://example.edu/")
    assert "https://example.edu/" in registry
    assert len(registry) == 1


def test_try_admit_from_many_threads_admits_once():
    registry = VisitedRegistry()
    urls = [f"https://example.edu/p{i % 10}" for i in range(1000)]
    with ThreadPoolExecutor(max_workers=16) as pool:
        admitted = list(pool.map(registry.try_admit, urls))

    assert sum(admitted) == 10
    assert sorted(registry) == sorted({*urls})


@pytest.mark.asyncio()
async def test_try_admit_from_many_tasks_admits_once():
    registry = VisitedRegistry()

    async def admit(url):
        await asyncio.sleep(0)
        return registry.try_admit(url)

    results = await asyncio.gather(*(admit("https://example.edu/shared") for _ in range(50)))
    assert results.count(True) == 1
