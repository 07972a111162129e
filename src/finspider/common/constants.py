"""全局常量定义"""

from __future__ import annotations

# ============================================================================
# 爬取相关
# ============================================================================

DEFAULT_START_URLS: tuple[str, ...] = ("https://example-finance.com/loans",)
DEFAULT_MAX_REQUESTS_PER_CRAWL = 200
DEFAULT_CRAWL_CONCURRENCY = 3
DEFAULT_PAGE_TIMEOUT_MS = 30000

# 产品页 / 列表页链接匹配（针对绝对 URL）
PRODUCT_LINK_GLOBS: tuple[str, ...] = (
    "**/product/**",
    "**/products/**",
    "**/loan/**",
    "**/loans/**",
    "**/bnpl/**",
    "**/pay-later/**",
)

# ============================================================================
# 字段抽取相关
# ============================================================================

FEES_SNIPPET_MAX_CHARS = 400
ELIGIBILITY_SNIPPET_MAX_CHARS = 800

# ============================================================================
# 脱敏占位符
# ============================================================================

REDACTED_EMAIL = "[REDACTED_EMAIL]"
REDACTED_PHONE = "[REDACTED_PHONE]"
REDACTED_SSN = "[REDACTED_SSN]"

# ============================================================================
# 输入验证
# ============================================================================

MAX_URL_LENGTH = 2048
VALID_URL_SCHEMES = frozenset({"http", "https"})

# ============================================================================
# 文件相关
# ============================================================================

OUTPUT_DATASET_FILENAME = "dataset.jsonl"
OUTPUT_SUMMARY_FILENAME = "crawl_summary.json"
