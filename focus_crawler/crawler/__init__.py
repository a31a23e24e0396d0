from focus_crawler.crawler.crawler import AsyncCrawler, build_policy
from focus_crawler.crawler.models import CanonicalURL, FrontierEntry, PageRecord, RawPage
from focus_crawler.crawler.urls import canonicalize

__all__ = [
    "AsyncCrawler",
    "build_policy",
    "CanonicalURL",
    "FrontierEntry",
    "PageRecord",
    "RawPage",
    "canonicalize",
]
