"""Pipeline模块 - 爬取运行入口"""

from .runner import run_crawl

__all__ = ["run_crawl"]
