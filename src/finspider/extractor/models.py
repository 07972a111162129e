"""产品抽取数据模型定义"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ProductType(str, Enum):
    """金融产品类型"""

    BNPL = "BNPL"
    LOAN = "Loan"
    CREDIT_PRODUCT = "Credit Product"


@dataclass(frozen=True)
class ExtractionConfig:
    """抽取配置

    redact_pii 为 True 时，所有文本字段在成为记录前都经过脱敏。
    """

    redact_pii: bool = True


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ProductRecord:
    """单页产品记录

    每个合格页面产生一条，创建后即交给输出端，不再修改。
    """

    provider: str
    product_name: str
    product_type: ProductType
    apr: str  # 自由文本，可能为空
    fees: str  # 费用片段（≤400 字符）
    term: str
    eligibility: str  # 申请条件片段（≤800 字符）
    sample_monthly_payment: str  # 可能为空
    source_url: str
    extracted_at: str = field(default_factory=_utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        """转换为字典"""
        return {
            "provider": self.provider,
            "product_name": self.product_name,
            "product_type": self.product_type.value,
            "apr": self.apr,
            "fees": self.fees,
            "term": self.term,
            "eligibility": self.eligibility,
            "sample_monthly_payment": self.sample_monthly_payment,
            "source_url": self.source_url,
            "extracted_at": self.extracted_at,
        }


class OutcomeStatus(str, Enum):
    ACCEPTED = "accepted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractionOutcome:
    """单页抽取结果

    accepted 时携带完整记录；skipped / failed 时只携带原因，不存在半成品记录。
    """

    status: OutcomeStatus
    url: str
    record: ProductRecord | None = None
    reason: str | None = None

    @classmethod
    def accepted(cls, record: ProductRecord) -> "ExtractionOutcome":
        return cls(status=OutcomeStatus.ACCEPTED, url=record.source_url, record=record)

    @classmethod
    def skipped(cls, url: str, reason: str) -> "ExtractionOutcome":
        return cls(status=OutcomeStatus.SKIPPED, url=url, reason=reason)

    @classmethod
    def failed(cls, url: str, reason: str) -> "ExtractionOutcome":
        return cls(status=OutcomeStatus.FAILED, url=url, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.ACCEPTED
