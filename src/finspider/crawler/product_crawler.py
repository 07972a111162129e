"""产品页爬虫

从种子 URL 出发，用 asyncio worker 并发抓取页面：
1. 抓取页面并解析
2. 发现产品页 / 列表页链接并入队（受请求预算限制，URL 去重）
3. 交给 RecordAssembler 判定与抽取
4. 合格记录写入输出端

单页失败（抓取、解析、抽取、写入）只记录日志并计数，不会中断整个爬取。
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable

from ..common.config import CrawlConfig
from ..common.exceptions import FetchError, PageParseError, StorageError
from ..common.logger import get_crawler_logger
from ..common.storage import RecordSink
from ..extractor import ExtractionConfig, FetchedPage, OutcomeStatus, RecordAssembler
from .fetcher import PageFetcher
from .links import CrawlRequest, discover_links, host_of

logger = get_crawler_logger()


@dataclass
class CrawlSummary:
    """一次爬取的统计"""

    requests: int = 0
    records: int = 0
    skipped: int = 0
    failed_extractions: int = 0
    failed_fetches: int = 0
    enqueued: int = 0
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    finished_at: str = ""
    output_file: str = ""

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "requests": self.requests,
            "records": self.records,
            "skipped": self.skipped,
            "failed_extractions": self.failed_extractions,
            "failed_fetches": self.failed_fetches,
            "enqueued": self.enqueued,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "output_file": self.output_file,
        }


class ProductCrawler:
    """产品页爬虫"""

    def __init__(
        self,
        crawl_config: CrawlConfig,
        fetcher: PageFetcher,
        sink: RecordSink,
        assembler: RecordAssembler | None = None,
    ):
        self.crawl_config = crawl_config
        self.fetcher = fetcher
        self.sink = sink
        self.assembler = assembler or RecordAssembler(
            ExtractionConfig(redact_pii=crawl_config.redact_pii)
        )

        self.summary = CrawlSummary()
        self._queue: asyncio.Queue[CrawlRequest] | None = None
        self._seen: set[str] = set()
        self._scheduled = 0

    async def run(self, start_urls: Iterable[str] | None = None) -> CrawlSummary:
        """运行爬取直到队列耗尽或达到请求预算

        Args:
            start_urls: 种子 URL，缺省使用配置中的 start_urls

        Returns:
            爬取统计
        """
        self.summary = CrawlSummary()
        self._queue = asyncio.Queue()
        self._seen = set()
        self._scheduled = 0

        seeds = list(start_urls) if start_urls is not None else list(self.crawl_config.start_urls)
        for url in seeds:
            try:
                start_host = host_of(url)
            except ValueError:
                logger.warning(f"[Crawler] 种子 URL 无效，忽略: {url}")
                continue
            self._schedule(CrawlRequest(url=url, start_host=start_host))

        concurrency = self.crawl_config.concurrency
        logger.info(
            f"[Crawler] 开始爬取: 种子 {len(seeds)} 个, "
            f"预算 {self.crawl_config.max_requests_per_crawl}, 并发 {concurrency}"
        )

        await self.fetcher.start(concurrency)
        workers = [asyncio.create_task(self._worker()) for _ in range(concurrency)]
        try:
            await self._queue.join()
        finally:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            await self.fetcher.close()
            self.sink.close()
            self.summary.finished_at = datetime.now().isoformat()

        logger.info(
            f"[Crawler] 爬取结束: 请求 {self.summary.requests}, 记录 {self.summary.records}, "
            f"跳过 {self.summary.skipped}, 抽取失败 {self.summary.failed_extractions}, "
            f"抓取失败 {self.summary.failed_fetches}"
        )
        return self.summary

    def _schedule(self, request: CrawlRequest) -> bool:
        """入队：URL 去重，并保证总请求数不超过预算"""
        if request.url in self._seen:
            return False
        if self._scheduled >= self.crawl_config.max_requests_per_crawl:
            return False

        self._seen.add(request.url)
        self._scheduled += 1
        self._queue.put_nowait(request)
        return True

    async def _worker(self) -> None:
        while True:
            request = await self._queue.get()
            try:
                await self.process_request(request)
            except Exception as exc:  # noqa: BLE001
                logger.exception(f"[Crawler] 处理请求时出现未预期错误: {request.url} ({exc})")
            finally:
                self._queue.task_done()

    async def process_request(self, request: CrawlRequest) -> None:
        """处理单个请求"""
        self.summary.requests += 1
        logger.info(f"[Crawler] 处理: {request.url}")

        try:
            result = await self.fetcher.fetch(request.url)
        except FetchError as exc:
            self.summary.failed_fetches += 1
            logger.warning(f"[Crawler] 抓取失败: {exc}")
            return

        # 解析与抽取在线程中执行，事件循环只负责抓取与调度
        try:
            page = await asyncio.to_thread(FetchedPage.from_html, result.final_url, result.html)
        except PageParseError as exc:
            self.summary.failed_extractions += 1
            logger.warning(f"[Crawler] 页面解析失败: {exc}")
            return

        for child in discover_links(
            page,
            request,
            globs=self.crawl_config.link_globs,
            follow_internal_only=self.crawl_config.follow_internal_only,
        ):
            if self._schedule(child):
                self.summary.enqueued += 1

        outcome = await asyncio.to_thread(self.assembler.assemble, page)
        if outcome.status is OutcomeStatus.SKIPPED:
            self.summary.skipped += 1
            return
        if outcome.status is OutcomeStatus.FAILED:
            self.summary.failed_extractions += 1
            return

        try:
            self.sink.push(outcome.record)
        except StorageError as exc:
            logger.error(f"[Crawler] 记录写入失败: {exc}")
            return
        self.summary.records += 1
