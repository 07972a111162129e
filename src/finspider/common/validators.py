"""输入校验

种子 URL 和数值参数在爬取开始前校验，错误以 ValidationError 子类抛出。
"""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import urlparse

from .constants import MAX_URL_LENGTH, VALID_URL_SCHEMES
from .exceptions import URLValidationError, ValidationError


def validate_url(url: str, allow_empty: bool = False) -> str:
    """校验单个 URL，返回去掉首尾空白后的值

    Raises:
        URLValidationError: 为空（且不允许为空）、过长、无法解析、
            协议不是 http/https 或缺少域名时
    """
    cleaned = (url or "").strip()
    if not cleaned:
        if allow_empty:
            return ""
        raise URLValidationError("", "URL 不能为空")

    if len(cleaned) > MAX_URL_LENGTH:
        raise URLValidationError(cleaned, f"URL 长度超过 {MAX_URL_LENGTH} 字符")

    try:
        parsed = urlparse(cleaned)
    except ValueError as exc:
        raise URLValidationError(cleaned, f"URL 解析失败: {exc}") from exc

    scheme = parsed.scheme.lower()
    if not scheme:
        raise URLValidationError(cleaned, "缺少协议 (http/https)")
    if scheme not in VALID_URL_SCHEMES:
        raise URLValidationError(cleaned, f"不支持的协议: {parsed.scheme}")
    if not parsed.netloc:
        raise URLValidationError(cleaned, "缺少域名")

    return cleaned


def validate_start_urls(value: Any) -> tuple[str, ...]:
    """校验种子 URL 列表

    接受单个字符串，或由字符串 / {"url": ...} 对象组成的列表。
    """
    if isinstance(value, str):
        value = [value]

    items: Iterable[Any] = value or ()
    urls = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("url", "")
        urls.append(validate_url(str(item)))
    return tuple(urls)


def validate_positive_integer(
    value: int,
    name: str,
    min_value: int = 1,
    max_value: int | None = None,
) -> int:
    """校验整数参数的取值范围（含两端）

    Args:
        value: 待校验的值，bool 不算整数
        name: 参数名，用于错误消息
        min_value: 下限
        max_value: 上限，None 表示不限

    Raises:
        ValidationError: 类型不对或超出范围时
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} 必须是整数")
    if value < min_value:
        raise ValidationError(f"{name} 必须至少为 {min_value}")
    if max_value is not None and value > max_value:
        raise ValidationError(f"{name} 不能超过 {max_value}")
    return value
