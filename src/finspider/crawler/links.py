"""链接发现

从页面收集 <a href> 链接，按产品页 / 列表页 glob 过滤，并可选地只保留与种子同 host 的链接。
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Iterable
from urllib.parse import urldefrag, urljoin, urlparse

from ..common.logger import get_crawler_logger
from ..extractor.document import FetchedPage

logger = get_crawler_logger()

_SKIP_HREF_PREFIXES = ("#", "mailto:", "tel:", "javascript:", "data:")
_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class CrawlRequest:
    """待抓取请求"""

    url: str
    start_host: str  # 该请求所属种子的 host，在种子入队时确定
    depth: int = 0


def host_of(url: str) -> str:
    """URL 的 host（含非默认端口，http 的 80 与 https 的 443 省略）

    Raises:
        ValueError: URL 无法解析或没有 host 时
    """
    parsed = urlparse(url)
    hostname = parsed.hostname
    if not hostname:
        raise ValueError(f"URL 缺少 host: {url}")
    port = parsed.port
    if port is None or _DEFAULT_PORTS.get(parsed.scheme.lower()) == port:
        return hostname
    return f"{hostname}:{port}"


def is_same_host(candidate_url: str, start_host: str) -> bool:
    """候选链接是否与起始 host 相同

    URL 无法解析时放行（不做过滤），而不是拒绝。
    """
    try:
        return host_of(candidate_url) == start_host
    except ValueError:
        logger.debug(f"[Links] URL 无法解析，跳过 host 过滤: {candidate_url}")
        return True


def matches_globs(url: str, globs: Iterable[str]) -> bool:
    return any(fnmatchcase(url, pattern) for pattern in globs)


def extract_links(page: FetchedPage) -> list[str]:
    """页面上全部 http(s) 绝对链接，去掉 fragment，保持文档顺序去重"""
    links: list[str] = []
    seen: set[str] = set()

    for raw in page.xpath("//a[@href]/@href"):
        href = str(raw).strip()
        if not href or href.lower().startswith(_SKIP_HREF_PREFIXES):
            continue

        try:
            absolute, _ = urldefrag(urljoin(page.url, href))
            scheme = urlparse(absolute).scheme
        except ValueError:
            continue

        if scheme not in ("http", "https"):
            continue
        if absolute not in seen:
            seen.add(absolute)
            links.append(absolute)

    return links


def discover_links(
    page: FetchedPage,
    request: CrawlRequest,
    globs: Iterable[str],
    follow_internal_only: bool,
) -> list[CrawlRequest]:
    """生成需要继续入队的子请求

    Args:
        page: 当前页面
        request: 当前请求（提供起始 host 与深度）
        globs: 产品页 / 列表页 glob
        follow_internal_only: 是否只跟进同 host 链接

    Returns:
        子请求列表
    """
    globs = tuple(globs)
    children: list[CrawlRequest] = []

    for url in extract_links(page):
        if not matches_globs(url, globs):
            continue
        if follow_internal_only and not is_same_host(url, request.start_host):
            continue
        children.append(CrawlRequest(url=url, start_host=request.start_host, depth=request.depth + 1))

    return children
