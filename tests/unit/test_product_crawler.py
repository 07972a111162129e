"""产品页爬虫单元测试

使用假抓取器和内存输出端，不访问网络也不启动浏览器。
"""

import json
import threading

import pytest

from finspider.common.config import CrawlConfig
from finspider.common.exceptions import DatasetWriteError
from finspider.common.storage import MemoryRecordSink, RecordSink
from finspider.crawler import CrawlSummary, ProductCrawler
from finspider.extractor import RecordAssembler
from finspider.pipeline import run_crawl

SEED = "https://lender.com/loans"


def _config(**overrides) -> CrawlConfig:
    params = {
        "start_urls": [SEED],
        "max_requests_per_crawl": 10,
        "follow_internal_only": True,
        "redact_pii": True,
        "concurrency": 1,
    }
    params.update(overrides)
    return CrawlConfig(**params)


class FailingSink(RecordSink):
    """每次写入都失败的输出端"""

    def __init__(self):
        self.attempts = 0

    def push(self, record):
        self.attempts += 1
        raise DatasetWriteError("/tmp/dataset.jsonl", "写入失败")


class ThreadRecordingAssembler(RecordAssembler):
    """记录每次组装所在线程的组装器"""

    def __init__(self):
        super().__init__()
        self.threads = []

    def assemble(self, page):
        self.threads.append(threading.get_ident())
        return super().assemble(page)


class TestProductCrawler:
    """爬取流程测试"""

    @pytest.mark.asyncio
    async def test_crawl_site(self, fake_fetcher):
        """测试完整爬取：发现链接、抽取记录、抓取失败继续"""
        sink = MemoryRecordSink()
        crawler = ProductCrawler(_config(), fake_fetcher, sink)

        summary = await crawler.run()

        assert fake_fetcher.fetched == [
            "https://lender.com/loans",
            "https://lender.com/loans/personal",
            "https://lender.com/loans/auto",
        ]
        assert summary.requests == 3
        assert summary.enqueued == 2
        assert summary.failed_fetches == 1
        assert summary.records == 2
        assert summary.finished_at
        assert [r.source_url for r in sink.records] == [
            "https://lender.com/loans",
            "https://lender.com/loans/personal",
        ]
        assert fake_fetcher.closed is True

    @pytest.mark.asyncio
    async def test_records_are_redacted(self, fake_fetcher):
        """测试爬取输出的记录经过脱敏"""
        sink = MemoryRecordSink()
        await ProductCrawler(_config(), fake_fetcher, sink).run()

        personal = sink.records[1]
        assert "support@lender.com" not in personal.fees

    @pytest.mark.asyncio
    async def test_redaction_follows_crawl_config(self, fake_fetcher):
        """测试 redact_pii=False 时输出原始文本"""
        sink = MemoryRecordSink()
        await ProductCrawler(_config(redact_pii=False), fake_fetcher, sink).run()

        assert "support@lender.com" in sink.records[1].fees

    @pytest.mark.asyncio
    async def test_request_budget(self, fake_fetcher):
        """测试总请求数不超过预算"""
        summary = await ProductCrawler(
            _config(max_requests_per_crawl=2), fake_fetcher, MemoryRecordSink()
        ).run()

        assert summary.requests == 2
        assert len(fake_fetcher.fetched) == 2

    @pytest.mark.asyncio
    async def test_duplicate_urls_fetched_once(self, fake_fetcher):
        """测试重复 URL 只抓取一次"""
        await ProductCrawler(
            _config(start_urls=[SEED, SEED]), fake_fetcher, MemoryRecordSink()
        ).run()

        assert len(fake_fetcher.fetched) == len(set(fake_fetcher.fetched))

    @pytest.mark.asyncio
    async def test_follow_external(self, fake_fetcher):
        """测试允许外站时外站链接也被抓取"""
        summary = await ProductCrawler(
            _config(follow_internal_only=False), fake_fetcher, MemoryRecordSink()
        ).run()

        assert "https://other.com/loans/partner" in fake_fetcher.fetched
        assert summary.requests == 4

    @pytest.mark.asyncio
    async def test_concurrent_workers(self, fake_fetcher):
        """测试多 worker 时结果一致"""
        summary = await ProductCrawler(
            _config(concurrency=3), fake_fetcher, MemoryRecordSink()
        ).run()

        assert fake_fetcher.started_with == 3
        assert summary.requests == 3
        assert summary.records == 2

    @pytest.mark.asyncio
    async def test_invalid_seed_ignored(self, fake_fetcher):
        """测试无效种子被忽略"""
        summary = await ProductCrawler(_config(), fake_fetcher, MemoryRecordSink()).run(
            start_urls=["not-a-url"]
        )

        assert summary.requests == 0
        assert fake_fetcher.fetched == []

    @pytest.mark.asyncio
    async def test_unparseable_page(self, fake_fetcher):
        """测试空页面计为抽取失败"""
        fake_fetcher.pages = {SEED: ""}
        summary = await ProductCrawler(_config(), fake_fetcher, MemoryRecordSink()).run()

        assert summary.failed_extractions == 1
        assert summary.records == 0

    @pytest.mark.asyncio
    async def test_sink_failure_does_not_stop_crawl(self, fake_fetcher):
        """测试写入失败时继续处理后续页面"""
        sink = FailingSink()
        summary = await ProductCrawler(_config(), fake_fetcher, sink).run()

        assert sink.attempts == 2
        assert summary.records == 0
        assert summary.requests == 3


    @pytest.mark.asyncio
    async def test_assembly_runs_off_event_loop(self, fake_fetcher):
        """测试判定与抽取不在事件循环线程中执行"""
        loop_thread = threading.get_ident()
        assembler = ThreadRecordingAssembler()
        summary = await ProductCrawler(
            _config(), fake_fetcher, MemoryRecordSink(), assembler=assembler
        ).run()

        assert summary.records == 2
        assert len(assembler.threads) == 2
        assert loop_thread not in assembler.threads


class TestCrawlSummary:
    """爬取统计测试"""

    def test_to_dict(self):
        summary = CrawlSummary(requests=3, records=2)
        data = summary.to_dict()

        assert data["requests"] == 3
        assert data["records"] == 2
        assert data["started_at"]
        assert data["output_file"] == ""


class TestRunCrawl:
    """运行器测试"""

    @pytest.mark.asyncio
    async def test_writes_dataset_and_summary(self, fake_fetcher, temp_output_dir):
        """测试写出 JSONL 数据集和执行摘要"""
        summary = await run_crawl(
            crawl_config=_config(),
            output_dir=str(temp_output_dir),
            fetcher=fake_fetcher,
        )

        dataset = temp_output_dir / "dataset.jsonl"
        lines = dataset.read_text(encoding="utf-8").splitlines()
        assert len(lines) == summary.records == 2
        assert json.loads(lines[1])["product_name"] == "Personal Loan"

        saved = json.loads((temp_output_dir / "crawl_summary.json").read_text(encoding="utf-8"))
        assert saved["records"] == 2
        assert saved["output_file"] == str(dataset)
