"""自定义异常类

定义项目中使用的所有自定义异常，用于更精细的错误处理。
"""

from __future__ import annotations


class FinSpiderError(Exception):
    """FinSpider 基础异常类

    所有自定义异常的基类。
    """
    pass


class ExtractionError(FinSpiderError):
    """字段抽取失败

    单个页面的抽取过程出错时抛出，只影响当前页面。
    """
    def __init__(self, url: str, reason: str = "字段抽取失败"):
        super().__init__(f"{reason}: {url}")
        self.url = url
        self.reason = reason


class PageParseError(ExtractionError):
    """页面 HTML 无法解析"""
    def __init__(self, url: str, reason: str = "HTML 解析失败"):
        super().__init__(url, reason)


class FetchError(FinSpiderError):
    """页面抓取失败

    浏览器无法打开页面或在超时时间内未返回内容时抛出。
    """
    def __init__(self, url: str, message: str = "页面抓取失败"):
        super().__init__(f"{message}: {url}")
        self.url = url


class ValidationError(FinSpiderError):
    """验证失败错误"""
    pass


class URLValidationError(ValidationError):
    """URL 验证失败"""
    def __init__(self, url: str, reason: str = "格式无效"):
        super().__init__(f"URL 验证失败: {url}, 原因: {reason}")
        self.url = url
        self.reason = reason


class ConfigError(FinSpiderError):
    """配置相关错误"""
    pass


class ConfigFileNotFoundError(ConfigError):
    """配置文件未找到"""
    def __init__(self, path: str):
        super().__init__(f"配置文件未找到: {path}")
        self.path = path


class StorageError(FinSpiderError):
    """存储相关错误的基类"""
    pass


class DatasetWriteError(StorageError):
    """结果写入失败"""
    def __init__(self, path: str, message: str = "写入失败"):
        super().__init__(f"数据集{message}: {path}")
        self.path = path
