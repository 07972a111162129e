"""页面文档与文本规范化

把抓取到的 HTML 解析成可查询的 lxml 树，并提供小写化的可见文本供规则匹配。
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

from lxml import etree
from lxml import html as lxml_html
from lxml.etree import _Element

from ..common.exceptions import PageParseError

# 不可见元素内的文本不参与匹配
_VISIBLE_TEXT = etree.XPath(
    ".//text()[not(ancestor::script or ancestor::style"
    " or ancestor::noscript or ancestor::template)]"
)


def parse_html(html_content: str | bytes, url: str = "") -> _Element:
    """解析 HTML 为文档树（总是返回 <html> 根元素）

    Raises:
        PageParseError: 内容为空或无法解析时
    """
    if not html_content or not str(html_content).strip():
        raise PageParseError(url, "HTML 内容为空")

    try:
        return lxml_html.document_fromstring(html_content)
    except ValueError:
        # 带 encoding 声明的 str 需要按字节解析
        if isinstance(html_content, str):
            try:
                return lxml_html.document_fromstring(html_content.encode("utf-8"))
            except (etree.ParserError, ValueError) as exc:
                raise PageParseError(url, f"HTML 解析失败: {exc}") from exc
        raise PageParseError(url, "HTML 解析失败")
    except etree.ParserError as exc:
        raise PageParseError(url, f"HTML 解析失败: {exc}") from exc


def visible_text(element: _Element) -> str:
    """元素内全部可见文本，按源码顺序直接拼接"""
    return "".join(_VISIBLE_TEXT(element))


def element_text(element: _Element) -> str:
    """元素可见文本（去首尾空白，不改变大小写）"""
    return visible_text(element).strip()


def normalize_text(text: str) -> str:
    return text.lower()


@dataclass(frozen=True)
class FetchedPage:
    """一次抓取得到的页面

    只在单个爬取步骤内存在，由调用方持有，核心逻辑从不持久化它。
    """

    url: str  # 最终（跳转后）URL
    tree: _Element

    @classmethod
    def from_html(cls, url: str, html_content: str | bytes) -> "FetchedPage":
        return cls(url=url, tree=parse_html(html_content, url))

    @property
    def body(self) -> _Element:
        body = self.tree.find("body")
        return body if body is not None else self.tree

    @cached_property
    def normalized_text(self) -> str:
        """小写化的 body 可见文本"""
        return normalize_text(visible_text(self.body))

    def xpath(self, expression: str) -> list:
        return self.tree.xpath(expression)

    def meta_content(self, *, property: str | None = None, name: str | None = None) -> str:
        """读取第一个匹配 meta 标签的 content"""
        if property is not None:
            values = self.tree.xpath("//meta[@property=$v]/@content", v=property)
        else:
            values = self.tree.xpath("//meta[@name=$v]/@content", v=name)
        return str(values[0]).strip() if values else ""

    def first_text(self, expression: str) -> str:
        """第一个匹配元素的可见文本"""
        for element in self.tree.xpath(expression):
            if isinstance(element, _Element):
                return element_text(element)
        return ""
