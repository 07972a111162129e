"""产品页判定

廉价的前置过滤：URL 路径或页面文本命中关键词即放行。误判放行可以接受
（抽取器会退化为空字段），漏判的页面则被静默丢弃。
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

_PRODUCT_URL_RE = re.compile(r"product|loan|bnpl|pay-later|offer|plan", re.IGNORECASE)

_PRODUCT_TEXT_MARKERS = ("apr", "interest rate", "monthly payment")


@dataclass(frozen=True)
class PageDecision:
    accept: bool
    reason: str


def _url_path(url: str) -> str:
    try:
        return urlparse(url).path
    except ValueError:
        return url


def classify(url: str, normalized_text: str) -> PageDecision:
    """判断页面是否值得抽取

    Args:
        url: 页面最终 URL
        normalized_text: 小写化的页面可见文本

    Returns:
        判定结果，附带命中原因
    """
    match = _PRODUCT_URL_RE.search(_url_path(url))
    if match:
        return PageDecision(True, f"url:{match.group(0).lower()}")

    for marker in _PRODUCT_TEXT_MARKERS:
        if marker in normalized_text:
            return PageDecision(True, f"text:{marker}")

    return PageDecision(False, "not a product-like page")
