"""记录组装器

流程：页面判定 → 各字段抽取 → 逐字段脱敏 → 加盖来源与时间戳。
任何抽取异常都在这里被转换为 failed 结果，不会越过边界传给爬虫驱动。
"""

from __future__ import annotations

from ..common.constants import ELIGIBILITY_SNIPPET_MAX_CHARS, FEES_SNIPPET_MAX_CHARS
from ..common.exceptions import PageParseError
from ..common.logger import get_extractor_logger
from .classifier import classify
from .document import FetchedPage
from .fields import (
    extract_apr,
    extract_eligibility,
    extract_fees,
    extract_product_name,
    extract_product_type,
    extract_provider,
    extract_sample_monthly_payment,
    extract_term,
)
from .models import ExtractionConfig, ExtractionOutcome, ProductRecord
from .redactor import PIIRedactor

logger = get_extractor_logger()


class RecordAssembler:
    """单页记录组装器

    无跨页面共享的可变状态，可在任意多个页面上并行调用。
    """

    def __init__(self, config: ExtractionConfig | None = None):
        self.config = config or ExtractionConfig()
        self._redact = PIIRedactor(enabled=self.config.redact_pii)

    def assemble(self, page: FetchedPage) -> ExtractionOutcome:
        """对一个已抓取页面做判定和抽取

        Args:
            page: 已解析的页面

        Returns:
            accepted（带完整记录）/ skipped / failed
        """
        try:
            text = page.normalized_text
            decision = classify(page.url, text)
            if not decision.accept:
                logger.debug(f"[Assembler] 非产品页，跳过: {page.url}")
                return ExtractionOutcome.skipped(page.url, decision.reason)

            record = self._build_record(page, text)
        except Exception as exc:  # noqa: BLE001
            logger.warning(f"[Assembler] 抽取失败: {page.url} ({type(exc).__name__}: {exc})")
            return ExtractionOutcome.failed(page.url, f"{type(exc).__name__}: {exc}")

        logger.info(
            f"[Assembler] 已抽取: provider={record.provider!r} "
            f"product={record.product_name!r} url={page.url}"
        )
        return ExtractionOutcome.accepted(record)

    def assemble_html(self, url: str, html_content: str | bytes) -> ExtractionOutcome:
        """解析 HTML 后再组装；解析失败同样转换为 failed"""
        try:
            page = FetchedPage.from_html(url, html_content)
        except PageParseError as exc:
            logger.warning(f"[Assembler] 页面解析失败: {url} ({exc.reason})")
            return ExtractionOutcome.failed(url, exc.reason)
        return self.assemble(page)

    def _build_record(self, page: FetchedPage, text: str) -> ProductRecord:
        redact = self._redact

        apr = extract_apr(text)
        term = extract_term(text)

        return ProductRecord(
            provider=redact(extract_provider(page)),
            product_name=redact(extract_product_name(page)),
            product_type=extract_product_type(text),
            apr=redact(apr),
            # 占位符可能比原文长，脱敏后再按上限截断
            fees=redact(extract_fees(page))[:FEES_SNIPPET_MAX_CHARS],
            term=redact(term),
            eligibility=redact(extract_eligibility(page))[:ELIGIBILITY_SNIPPET_MAX_CHARS],
            sample_monthly_payment=redact(extract_sample_monthly_payment(text, apr, term)),
            source_url=page.url,
        )


def assemble(page: FetchedPage, config: ExtractionConfig | None = None) -> ExtractionOutcome:
    """便捷函数：用给定配置组装单页"""
    return RecordAssembler(config).assemble(page)
