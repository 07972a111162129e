"""字段抽取器

每个输出字段对应一个独立、无副作用的具名函数：
- 文本类规则（产品类型、APR、期限、月供）作用于小写化的整页可见文本
- DOM 类规则（提供方、产品名、费用、申请条件）作用于元素文本

缺数据时一律返回空字符串，不抛异常。
"""

from __future__ import annotations

import re
from typing import Callable, Iterable
from urllib.parse import urlparse

from lxml import etree
from lxml.etree import _Element

from ..common.constants import ELIGIBILITY_SNIPPET_MAX_CHARS, FEES_SNIPPET_MAX_CHARS
from .document import FetchedPage, element_text
from .models import ProductType

Producer = Callable[[], "str | None"]

# ============================================================================
# 规则
# ============================================================================

_BNPL_RE = re.compile(r"bnpl|buy now|pay later|pay-later", re.IGNORECASE)
_LOAN_RE = re.compile(r"loan|personal loan|microloan|installment", re.IGNORECASE)

_APR_RE = re.compile(
    r"\b(?:apr|interest rate|annual percentage rate)\b[^\d]{0,20}(\d{1,3}(?:\.\d+)?%?)",
    re.IGNORECASE,
)

_TERM_RE = re.compile(
    r"\b(term|months|weeks)\b[^\d]{0,20}(\d{1,3}\s?(?:months?|years?))",
    re.IGNORECASE,
)
_DURATION_RE = re.compile(r"\b(\d{1,3}\s?(?:months?|years?|weeks?))\b", re.IGNORECASE)
_TERM_KEYWORD_RE = re.compile(r"\b(term|months|weeks)\b", re.IGNORECASE)

_PAYMENT_RE = re.compile(
    r"(monthly payment|pay per month)[^\d$€£]{0,20}([$€£][0-9.,]+)",
    re.IGNORECASE,
)

_FEE_RE = re.compile("fee", re.IGNORECASE)
_FEE_ATTR_ELEMENTS = etree.XPath(
    "//body//*[contains(@class, 'fee') or contains(@id, 'fee')]"
)
_BODY_TEXT_NODES = etree.XPath(
    "//body//text()[not(ancestor::script or ancestor::style"
    " or ancestor::noscript or ancestor::template)]"
)

_ELIGIBILITY_RE = re.compile(r"eligibility|requirements|who can apply", re.IGNORECASE)

# 命中这些标签时扩展到父元素，让片段包含条件正文而不只是标题
_HEADING_TAGS = frozenset({
    "h1", "h2", "h3", "h4", "h5", "h6",
    "dt", "summary", "legend", "strong", "b", "label",
})

_PROVIDER_HEADER_XPATH = (
    "//header//h1"
    " | //*[contains(concat(' ', normalize-space(@class), ' '), ' site-name ')]"
)


# ============================================================================
# 通用工具
# ============================================================================


def first_non_empty(candidates: Iterable[Producer]) -> str:
    """按优先级依次求值，返回第一个非空结果

    后面的候选只在前面的候选缺失或为空时才会被调用。
    """
    for produce in candidates:
        value = produce()
        if value and value.strip():
            return value.strip()
    return ""


def _owner_element(text_node) -> _Element | None:
    """文本节点所属的元素（tail 文本属于上一级元素）"""
    parent = text_node.getparent()
    if parent is None:
        return None
    if text_node.is_tail:
        return parent.getparent()
    return parent


def _first_element_with_text(page: FetchedPage, pattern: re.Pattern) -> _Element | None:
    """按文档顺序找到第一个文本命中规则的最内层元素"""
    for node in _BODY_TEXT_NODES(page.tree):
        if pattern.search(node):
            return _owner_element(node)
    return None


def _snippet(element: _Element | None, max_chars: int) -> str:
    if element is None:
        return ""
    return element_text(element)[:max_chars]


# ============================================================================
# 各字段抽取
# ============================================================================


def extract_provider(page: FetchedPage) -> str:
    """og:site_name → application-name → 页头标题 / .site-name → 域名"""
    return first_non_empty((
        lambda: page.meta_content(property="og:site_name"),
        lambda: page.meta_content(name="application-name"),
        lambda: page.first_text(_PROVIDER_HEADER_XPATH),
        lambda: _hostname(page.url),
    ))


def _hostname(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def extract_product_name(page: FetchedPage) -> str:
    """h1 → og:title → <title> → 空"""
    return first_non_empty((
        lambda: page.first_text("//h1"),
        lambda: page.meta_content(property="og:title"),
        lambda: page.first_text("//title"),
    ))


def extract_product_type(text: str) -> ProductType:
    # BNPL 优先于 Loan
    if _BNPL_RE.search(text):
        return ProductType.BNPL
    if _LOAN_RE.search(text):
        return ProductType.LOAN
    return ProductType.CREDIT_PRODUCT


def extract_apr(text: str) -> str:
    match = _APR_RE.search(text)
    return match.group(1) if match else ""


def extract_fees(page: FetchedPage) -> str:
    """class/id 含 fee 的元素优先，否则取文本含 fee 的最内层元素"""
    for element in _FEE_ATTR_ELEMENTS(page.tree):
        text = element_text(element)
        if "fee" in text.lower():
            return text[:FEES_SNIPPET_MAX_CHARS]

    return _snippet(_first_element_with_text(page, _FEE_RE), FEES_SNIPPET_MAX_CHARS)


def extract_term(text: str) -> str:
    """关键词后接时长 → 单独的时长 → 关键词本身"""
    match = _TERM_RE.search(text)
    if match:
        return match.group(2)

    match = _DURATION_RE.search(text)
    if match:
        return match.group(1)

    match = _TERM_KEYWORD_RE.search(text)
    return match.group(1) if match else ""


def extract_eligibility(page: FetchedPage) -> str:
    element = _first_element_with_text(page, _ELIGIBILITY_RE)
    if element is not None and element.tag in _HEADING_TAGS:
        parent = element.getparent()
        if parent is not None and parent.tag not in ("body", "html"):
            element = parent
    return _snippet(element, ELIGIBILITY_SNIPPET_MAX_CHARS)


def extract_sample_monthly_payment(text: str, apr: str, term: str) -> str:
    """APR 与期限都存在时才尝试；没有本金，不做任何计算，只原样截取示例金额"""
    if not apr or not term:
        return ""
    match = _PAYMENT_RE.search(text)
    return match.group(2) if match else ""
