"""配置管理"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_CRAWL_CONCURRENCY,
    DEFAULT_MAX_REQUESTS_PER_CRAWL,
    DEFAULT_PAGE_TIMEOUT_MS,
    DEFAULT_START_URLS,
    OUTPUT_DATASET_FILENAME,
    OUTPUT_SUMMARY_FILENAME,
    PRODUCT_LINK_GLOBS,
)
from .exceptions import ConfigError, ConfigFileNotFoundError
from .validators import validate_positive_integer, validate_start_urls

# 加载 .env 文件
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_start_urls() -> tuple[str, ...]:
    raw = os.getenv("START_URLS", "")
    urls = tuple(u.strip() for u in raw.split(",") if u.strip())
    return urls or DEFAULT_START_URLS


# 爬取输入中 camelCase 键与字段名的对应关系
_INPUT_KEY_MAP = {
    "startUrls": "start_urls",
    "maxRequestsPerCrawl": "max_requests_per_crawl",
    "followInternalOnly": "follow_internal_only",
    "redactPII": "redact_pii",
    "concurrency": "concurrency",
}


class CrawlConfig(BaseModel):
    """爬取输入配置

    一次爬取的全部输入，构造后不可修改，显式传入爬虫而不是读取全局状态。
    """

    # 环境变量给出的默认值同样经过字段校验
    model_config = ConfigDict(frozen=True, validate_default=True)

    start_urls: tuple[str, ...] = Field(default_factory=_env_start_urls)
    max_requests_per_crawl: int = Field(
        default_factory=lambda: int(
            os.getenv("MAX_REQUESTS_PER_CRAWL", str(DEFAULT_MAX_REQUESTS_PER_CRAWL))
        )
    )
    # 只跟进与种子同 host 的链接
    follow_internal_only: bool = Field(
        default_factory=lambda: _env_bool("FOLLOW_INTERNAL_ONLY", True)
    )
    redact_pii: bool = Field(default_factory=lambda: _env_bool("REDACT_PII", True))
    # 并发 worker 数（每个 worker 使用独立页面）
    concurrency: int = Field(
        default_factory=lambda: int(os.getenv("CRAWL_CONCURRENCY", str(DEFAULT_CRAWL_CONCURRENCY)))
    )
    link_globs: tuple[str, ...] = PRODUCT_LINK_GLOBS

    @field_validator("start_urls", mode="before")
    @classmethod
    def _normalize_start_urls(cls, value: Any) -> tuple[str, ...]:
        # 兼容单个字符串和 {"url": "..."} 形式的输入
        return validate_start_urls(value)

    @field_validator("max_requests_per_crawl", "concurrency")
    @classmethod
    def _check_positive(cls, value: int, info) -> int:
        return validate_positive_integer(value, info.field_name)

    @classmethod
    def from_input(cls, data: dict[str, Any]) -> "CrawlConfig":
        """从 actor 风格的输入字典创建（camelCase 键，全部可选）"""
        if not isinstance(data, dict):
            raise ConfigError("爬取输入必须是 JSON 对象")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _INPUT_KEY_MAP.get(key, key)
            if name in cls.model_fields and value is not None:
                kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str | Path) -> "CrawlConfig":
        """从 JSON 文件读取爬取输入"""
        path = Path(path)
        if not path.exists():
            raise ConfigFileNotFoundError(str(path))

        try:
            data = json.loads(path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise ConfigError(f"爬取输入 JSON 解析失败: {exc}") from exc

        return cls.from_input(data)


class BrowserConfig(BaseModel):
    """浏览器配置"""

    headless: bool = Field(default_factory=lambda: _env_bool("HEADLESS", True))
    viewport_width: int = Field(default_factory=lambda: int(os.getenv("VIEWPORT_WIDTH", "1280")))
    viewport_height: int = Field(default_factory=lambda: int(os.getenv("VIEWPORT_HEIGHT", "720")))
    timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("PAGE_TIMEOUT_MS", str(DEFAULT_PAGE_TIMEOUT_MS)))
    )


class OutputConfig(BaseModel):
    """输出配置"""

    output_dir: str = Field(default_factory=lambda: os.getenv("OUTPUT_DIR", "output"))
    dataset_file: str = OUTPUT_DATASET_FILENAME
    summary_file: str = OUTPUT_SUMMARY_FILENAME


class Config(BaseModel):
    """全局配置"""

    crawl: CrawlConfig = Field(default_factory=CrawlConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def load(cls) -> "Config":
        """加载配置"""
        return cls()

    def ensure_dirs(self) -> None:
        """确保输出目录存在"""
        Path(self.output.output_dir).mkdir(parents=True, exist_ok=True)


# 全局配置实例
config = Config.load()
