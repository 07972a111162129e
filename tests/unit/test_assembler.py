"""记录组装器单元测试"""

import re
from datetime import datetime

from finspider.common.constants import (
    ELIGIBILITY_SNIPPET_MAX_CHARS,
    FEES_SNIPPET_MAX_CHARS,
    REDACTED_EMAIL,
    REDACTED_PHONE,
)
from finspider.extractor import assembler as assembler_module
from finspider.extractor.assembler import RecordAssembler, assemble
from finspider.extractor.document import FetchedPage
from finspider.extractor.models import ExtractionConfig, OutcomeStatus, ProductType


class TestAssembleAccepted:
    """合格页面测试"""

    def test_bnpl_page(self, bnpl_page):
        """测试 BNPL 页面：类型、APR 数字、期限"""
        outcome = RecordAssembler().assemble(bnpl_page)

        assert outcome.status is OutcomeStatus.ACCEPTED
        record = outcome.record
        assert record.product_type is ProductType.BNPL
        assert re.match(r"^\d", record.apr)
        assert "6 month" in record.term
        assert record.provider == "Acme Finance"
        assert record.product_name == "Flex Pay"
        assert record.sample_monthly_payment == "$25.00"

    def test_single_record_with_source_and_timestamp(self, loan_page):
        """测试记录带来源 URL 和 ISO 8601 时间戳"""
        outcome = RecordAssembler().assemble(loan_page)

        assert outcome.ok
        assert outcome.url == loan_page.url == "https://lender.com/loans/personal"
        assert outcome.record.source_url == loan_page.url
        parsed = datetime.fromisoformat(outcome.record.extracted_at)
        assert parsed.tzinfo is not None

    def test_pii_redacted(self, loan_page):
        """测试邮箱和电话被脱敏"""
        record = RecordAssembler().assemble(loan_page).record

        assert "support@lender.com" not in record.fees
        assert "123-4567" not in record.fees
        assert REDACTED_EMAIL in record.fees
        assert REDACTED_PHONE in record.fees
        assert "jane.doe@mail.com" not in record.eligibility
        assert REDACTED_EMAIL in record.eligibility

    def test_contact_sentence_redacted_in_record(self):
        """测试费用片段里的联系方式句子被脱敏"""
        page = FetchedPage.from_html(
            "https://lender.com/loans/personal",
            "<html><body><h1>Personal Loan</h1>"
            '<div class="fees">Late fee $15. Contact us at jane.doe@example.com or 555-123-4567</div>'
            "</body></html>",
        )
        record = RecordAssembler().assemble(page).record

        assert record.fees == f"Late fee $15. Contact us at {REDACTED_EMAIL} or {REDACTED_PHONE}"

    def test_redaction_disabled(self, loan_page):
        """测试关闭脱敏时保留原始文本"""
        record = RecordAssembler(ExtractionConfig(redact_pii=False)).assemble(loan_page).record

        assert "support@lender.com" in record.fees
        assert "+1 (555) 123-4567" in record.fees
        assert "jane.doe@mail.com" in record.eligibility

    def test_loan_fields(self, loan_page):
        """测试贷款页面各字段"""
        record = RecordAssembler().assemble(loan_page).record

        assert record.provider == "Lender Co"
        assert record.product_name == "Personal Loan"
        assert record.product_type is ProductType.LOAN
        assert record.apr == "9.99%"
        assert record.term == "36 months"
        assert record.sample_monthly_payment == "$322.67"

    def test_missing_product_name(self, no_title_page):
        """测试没有 h1 / og:title / title 时产品名为空"""
        record = RecordAssembler().assemble(no_title_page).record

        assert record.product_name == ""
        assert record.provider == "example.com"
        assert record.product_type is ProductType.CREDIT_PRODUCT

    def test_payment_empty_without_term(self, no_title_page):
        """测试缺少期限时不抽取月供"""
        record = RecordAssembler().assemble(no_title_page).record

        assert record.apr == "12.5%"
        assert record.term == ""
        assert record.sample_monthly_payment == ""

    def test_to_dict(self, bnpl_page):
        """测试记录转字典"""
        data = RecordAssembler().assemble(bnpl_page).record.to_dict()

        assert data["product_type"] == "BNPL"
        assert data["source_url"] == bnpl_page.url
        assert set(data) == {
            "provider", "product_name", "product_type", "apr", "fees", "term",
            "eligibility", "sample_monthly_payment", "source_url", "extracted_at",
        }


class TestAssembleLimits:
    """片段长度限制测试"""

    def test_limits_after_redaction(self):
        """测试脱敏占位符变长后仍不超过上限"""
        fees = "fee a@b.co " * 100
        eligibility = "Eligibility: " + "x@y.co " * 300
        page = FetchedPage.from_html(
            "https://lender.com/loans/card",
            f'<html><body><div class="fees">{fees}</div><p>{eligibility}</p></body></html>',
        )
        record = RecordAssembler().assemble(page).record

        assert len(record.fees) <= FEES_SNIPPET_MAX_CHARS
        assert len(record.eligibility) <= ELIGIBILITY_SNIPPET_MAX_CHARS
        assert "@" not in record.fees


class TestAssembleSkippedAndFailed:
    """跳过与失败测试"""

    def test_non_product_page_skipped(self, non_product_page):
        """测试非产品页被跳过且没有记录"""
        outcome = RecordAssembler().assemble(non_product_page)

        assert outcome.status is OutcomeStatus.SKIPPED
        assert outcome.record is None
        assert outcome.reason == "not a product-like page"

    def test_extractor_exception_becomes_failed(self, loan_page, monkeypatch):
        """测试抽取器异常被转换为 failed"""
        def boom(page):
            raise RuntimeError("boom")

        monkeypatch.setattr(assembler_module, "extract_fees", boom)
        outcome = RecordAssembler().assemble(loan_page)

        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.record is None
        assert outcome.reason == "RuntimeError: boom"
        assert not outcome.ok

    def test_assemble_html_parse_failure(self):
        """测试空 HTML 被转换为 failed"""
        outcome = RecordAssembler().assemble_html("https://lender.com/loans/x", "")

        assert outcome.status is OutcomeStatus.FAILED
        assert outcome.reason == "HTML 内容为空"

    def test_assemble_html(self):
        """测试从 HTML 直接组装"""
        outcome = RecordAssembler().assemble_html(
            "https://lender.com/loans/x", "<html><body><h1>X Loan</h1></body></html>"
        )
        assert outcome.ok
        assert outcome.record.product_name == "X Loan"

    def test_module_level_assemble(self, loan_page):
        """测试便捷函数"""
        outcome = assemble(loan_page, ExtractionConfig(redact_pii=False))
        assert "support@lender.com" in outcome.record.fees
