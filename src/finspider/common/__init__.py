"""Common模块 - 公共工具和基础设施

该模块提供：
- 全局配置管理
- 日志系统
- 异常类
- 常量定义
- 输入验证
"""

from .config import config, Config, CrawlConfig
from .logger import get_logger, console
from .exceptions import (
    FinSpiderError,
    ExtractionError,
    PageParseError,
    FetchError,
    ValidationError,
    URLValidationError,
    ConfigError,
    StorageError,
)
from .constants import (
    DEFAULT_START_URLS,
    DEFAULT_MAX_REQUESTS_PER_CRAWL,
    PRODUCT_LINK_GLOBS,
)

__all__ = [
    # 配置
    "config",
    "Config",
    "CrawlConfig",
    # 日志
    "get_logger",
    "console",
    # 异常
    "FinSpiderError",
    "ExtractionError",
    "PageParseError",
    "FetchError",
    "ValidationError",
    "URLValidationError",
    "ConfigError",
    "StorageError",
    # 常量
    "DEFAULT_START_URLS",
    "DEFAULT_MAX_REQUESTS_PER_CRAWL",
    "PRODUCT_LINK_GLOBS",
]
