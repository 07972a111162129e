"""FinSpider - 金融产品页爬取与字段抽取"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .crawler.product_crawler import ProductCrawler as ProductCrawler
    from .extractor.assembler import RecordAssembler as RecordAssembler
    from .pipeline.runner import run_crawl as run_crawl

__all__ = [
    "__version__",
    "ProductCrawler",
    "RecordAssembler",
    "run_crawl",
]


def __getattr__(name: str) -> Any:
    """延迟导出，导入包时不加载 Playwright 等运行时依赖"""
    if name == "RecordAssembler":
        from .extractor.assembler import RecordAssembler

        return RecordAssembler
    if name == "ProductCrawler":
        from .crawler.product_crawler import ProductCrawler

        return ProductCrawler
    if name == "run_crawl":
        from .pipeline.runner import run_crawl

        return run_crawl
    raise AttributeError(f"module 'finspider' has no attribute '{name}'")
