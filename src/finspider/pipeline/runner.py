"""爬取运行器。

把爬取输入配置、浏览器抓取器、JSONL 输出端与 ProductCrawler 串起来，
运行结束后写出执行摘要。
"""

from __future__ import annotations

import json
from pathlib import Path

from ..common.browser import BrowserSession
from ..common.config import CrawlConfig, config
from ..common.logger import get_crawler_logger
from ..common.storage import JsonlRecordSink
from ..crawler import BrowserPageFetcher, CrawlSummary, PageFetcher, ProductCrawler

logger = get_crawler_logger()


async def run_crawl(
    crawl_config: CrawlConfig | None = None,
    output_dir: str | None = None,
    headless: bool | None = None,
    fetcher: PageFetcher | None = None,
) -> CrawlSummary:
    """运行一次完整爬取。

    Args:
        crawl_config: 爬取输入，缺省使用全局配置。
        output_dir: 结果输出目录，缺省使用全局配置。
        headless: 是否以无头模式运行浏览器。
        fetcher: 自定义抓取器，缺省使用 Playwright 浏览器抓取器。

    Returns:
        爬取统计。
    """
    crawl_config = crawl_config or config.crawl
    output_path = Path(output_dir or config.output.output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    dataset_path = output_path / config.output.dataset_file
    summary_path = output_path / config.output.summary_file

    sink = JsonlRecordSink(dataset_path)
    fetcher = fetcher or BrowserPageFetcher(BrowserSession(headless=headless))
    crawler = ProductCrawler(crawl_config=crawl_config, fetcher=fetcher, sink=sink)

    try:
        summary = await crawler.run()
    finally:
        # 浏览器会话由这里创建，也由这里关闭
        if isinstance(fetcher, BrowserPageFetcher) and fetcher.session.started:
            await fetcher.session.stop()

    summary.output_file = str(dataset_path)
    _write_summary(summary_path, summary)
    logger.info(f"[Pipeline] 结果已保存到: {dataset_path}")
    return summary


def _write_summary(path: Path, summary: CrawlSummary) -> None:
    """将执行摘要写入 JSON 文件。"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(summary.to_dict(), handle, ensure_ascii=False, indent=2)
