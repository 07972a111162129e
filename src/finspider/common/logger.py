"""日志

所有模块通过 get_logger 取得带 RichHandler 的标准 logging 日志器，
控制台级别由环境变量 LOG_LEVEL 决定，文件日志按需追加。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console()

CRAWLER_LOGGER_NAME = "finspider.crawler"
EXTRACTOR_LOGGER_NAME = "finspider.extractor"

_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> int:
    """LOG_LEVEL 环境变量对应的级别，无法识别时为 INFO"""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _rich_handler(level: int) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=os.getenv("LOG_SHOW_LOCALS", "false").lower() == "true",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    return handler


def get_logger(name: str) -> logging.Logger:
    """获取日志器

    同名日志器只配置一次；日志不向上传播，避免和根日志器重复输出。

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("[Crawler] 处理: https://example-finance.com/loans")
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = get_log_level()
    logger.setLevel(level)
    logger.addHandler(_rich_handler(level))
    logger.propagate = False
    return logger


def setup_file_logging(
    logger: logging.Logger,
    log_file: str | Path,
    level: int = logging.DEBUG,
) -> None:
    """给日志器追加 UTF-8 文件输出

    文件级别比日志器当前级别更细时，同时放开日志器本身的门槛，
    控制台 handler 的级别保持不变。
    """
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    logger.addHandler(handler)

    if level < logger.level:
        logger.setLevel(level)


def get_crawler_logger() -> logging.Logger:
    """爬取驱动（链接、抓取、调度、运行器）共用的日志器"""
    return get_logger(CRAWLER_LOGGER_NAME)


def get_extractor_logger() -> logging.Logger:
    """判定与抽取共用的日志器"""
    return get_logger(EXTRACTOR_LOGGER_NAME)
