"""Crawler模块 - 爬取驱动

- links.py: 链接发现与 host 过滤
- fetcher.py: 页面抓取（Playwright）
- product_crawler.py: 并发爬取、预算控制与记录输出
"""

from .links import CrawlRequest, discover_links, extract_links, is_same_host, matches_globs
from .fetcher import BrowserPageFetcher, FetchResult, PageFetcher
from .product_crawler import CrawlSummary, ProductCrawler

__all__ = [
    "CrawlRequest",
    "discover_links",
    "extract_links",
    "is_same_host",
    "matches_globs",
    "PageFetcher",
    "BrowserPageFetcher",
    "FetchResult",
    "ProductCrawler",
    "CrawlSummary",
]
