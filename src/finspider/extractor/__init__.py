"""产品页抽取模块

从已抓取的页面中：
- 判定是否为金融产品页
- 按字段规则抽取结构化信息
- 对输出字段做 PII 脱敏
- 组装带时间戳的产品记录
"""

from .models import (
    ExtractionConfig,
    ExtractionOutcome,
    OutcomeStatus,
    ProductRecord,
    ProductType,
)
from .document import FetchedPage, parse_html
from .classifier import PageDecision, classify
from .redactor import PIIRedactor, redact
from .assembler import RecordAssembler, assemble

__all__ = [
    # 数据模型
    "ExtractionConfig",
    "ExtractionOutcome",
    "OutcomeStatus",
    "ProductRecord",
    "ProductType",
    # 页面
    "FetchedPage",
    "parse_html",
    # 判定 / 脱敏 / 组装
    "PageDecision",
    "classify",
    "PIIRedactor",
    "redact",
    "RecordAssembler",
    "assemble",
]
