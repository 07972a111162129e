"""PII 脱敏

依次替换邮箱、电话、SSN 样式的子串为固定占位符。占位符本身不含数字和 @，
因此对已脱敏文本再次脱敏结果不变。
"""

from __future__ import annotations

import re

from ..common.constants import REDACTED_EMAIL, REDACTED_PHONE, REDACTED_SSN

_EMAIL_RE = re.compile(r"\b[A-Z0-9._%+\-]+@[A-Z0-9.\-]+\.[A-Z]{2,}\b", re.IGNORECASE)

# 可选 +，以数字开头和结尾，中间允许空格 . - ( )
_PHONE_CANDIDATE_RE = re.compile(r"\+?\d[\d\-\s().]{6,}\d")
_PHONE_MIN_DIGITS = 8

_SSN_RE = re.compile(r"\b\d{3}[-.\s]?\d{2}[-.\s]?\d{4}\b")


def redact_emails(text: str) -> str:
    return _EMAIL_RE.sub(REDACTED_EMAIL, text)


def _phone_replacement(match: re.Match) -> str:
    candidate = match.group(0)
    digits = sum(ch.isdigit() for ch in candidate)
    return REDACTED_PHONE if digits >= _PHONE_MIN_DIGITS else candidate


def redact_phones(text: str) -> str:
    """数字总数不少于 8 个的电话样式串"""
    return _PHONE_CANDIDATE_RE.sub(_phone_replacement, text)


def redact_ssns(text: str) -> str:
    return _SSN_RE.sub(REDACTED_SSN, text)


def redact(text: str, enabled: bool = True) -> str:
    """对单个字符串做脱敏

    Args:
        text: 原始文本
        enabled: 为 False 时原样返回

    Returns:
        脱敏后的文本
    """
    if not enabled or not text:
        return text

    # 顺序固定：前一步产生的占位符不会再被后一步匹配
    out = redact_emails(text)
    out = redact_phones(out)
    out = redact_ssns(out)
    return out


class PIIRedactor:
    """绑定开关的脱敏器，供组装器持有"""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def __call__(self, text: str) -> str:
        return redact(text, self.enabled)
