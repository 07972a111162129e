"""页面抓取

核心抽取逻辑不做任何网络 I/O，抓取由这里的 PageFetcher 实现提供。
不做重试、限速或代理轮换。
"""

from __future__ import annotations

import abc
import asyncio
from dataclasses import dataclass

from playwright.async_api import Error as PlaywrightError, Page

from ..common.browser import BrowserSession
from ..common.exceptions import FetchError
from ..common.logger import get_crawler_logger

logger = get_crawler_logger()


@dataclass
class FetchResult:
    """一次抓取的结果"""

    url: str  # 请求的 URL
    final_url: str  # 跳转后的最终 URL
    html: str
    status: int | None = None


class PageFetcher(abc.ABC):
    """页面抓取器抽象"""

    async def start(self, concurrency: int = 1) -> None:
        """启动抓取器（默认无操作）"""
        return None

    @abc.abstractmethod
    async def fetch(self, url: str) -> FetchResult:
        """抓取单个页面

        Raises:
            FetchError: 抓取失败时
        """

    async def close(self) -> None:
        """关闭抓取器（默认无操作）"""
        return None


class BrowserPageFetcher(PageFetcher):
    """基于 Playwright 的抓取器

    启动时按并发数预开页面，每次抓取借用一个页面，用完归还。
    """

    def __init__(self, session: BrowserSession | None = None, wait_until: str = "domcontentloaded"):
        self.session = session or BrowserSession()
        self.wait_until = wait_until
        self._pages: asyncio.Queue[Page] | None = None
        self._owns_session = session is None

    async def start(self, concurrency: int = 1) -> None:
        if not self.session.started:
            await self.session.start()

        self._pages = asyncio.Queue()
        for _ in range(max(1, concurrency)):
            self._pages.put_nowait(await self.session.new_page())

    async def fetch(self, url: str) -> FetchResult:
        if self._pages is None:
            raise RuntimeError("Fetcher not started")

        page = await self._pages.get()
        try:
            response = await page.goto(url, wait_until=self.wait_until)
            status = response.status if response else None
            if status is not None and status >= 400:
                raise FetchError(url, f"HTTP {status}")
            html = await page.content()
            return FetchResult(url=url, final_url=page.url or url, html=html, status=status)
        except PlaywrightError as exc:
            raise FetchError(url, f"浏览器打开页面失败 ({exc.message})") from exc
        finally:
            self._pages.put_nowait(page)

    async def close(self) -> None:
        if self._pages is not None:
            while not self._pages.empty():
                page = self._pages.get_nowait()
                try:
                    await page.close()
                except PlaywrightError as exc:
                    logger.debug(f"[Fetcher] 关闭页面失败: {exc.message}")
            self._pages = None

        if self._owns_session:
            await self.session.stop()
