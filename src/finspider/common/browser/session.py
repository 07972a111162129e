"""浏览器会话管理"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from playwright.async_api import async_playwright, Browser, BrowserContext, Page

from ..config import config


class BrowserSession:
    """浏览器会话管理器

    一个会话对应一个浏览器上下文；并发 worker 通过 new_page() 各自持有独立页面。
    """

    def __init__(
        self,
        headless: bool | None = None,
        viewport_width: int | None = None,
        viewport_height: int | None = None,
        timeout_ms: int | None = None,
    ):
        self.headless = headless if headless is not None else config.browser.headless
        self.viewport_width = viewport_width or config.browser.viewport_width
        self.viewport_height = viewport_height or config.browser.viewport_height
        self.timeout_ms = timeout_ms or config.browser.timeout_ms

        self._playwright = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    async def start(self) -> BrowserContext:
        """启动浏览器并返回上下文"""
        self._playwright = await async_playwright().start()

        self._browser = await self._playwright.chromium.launch(headless=self.headless)

        self._context = await self._browser.new_context(
            viewport={
                "width": self.viewport_width,
                "height": self.viewport_height,
            },
            user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        )
        # 设置默认超时
        self._context.set_default_timeout(self.timeout_ms)

        return self._context

    async def new_page(self) -> Page:
        """在当前上下文中打开新页面"""
        if not self._context:
            raise RuntimeError("Browser session not started")
        return await self._context.new_page()

    async def stop(self) -> None:
        """关闭浏览器"""
        if self._context:
            await self._context.close()
        if self._browser:
            await self._browser.close()
        if self._playwright:
            await self._playwright.stop()

        self._context = None
        self._browser = None
        self._playwright = None

    @property
    def started(self) -> bool:
        return self._context is not None


@asynccontextmanager
async def create_browser_session(
    headless: bool | None = None,
    timeout_ms: int | None = None,
) -> AsyncGenerator[BrowserSession, None]:
    """创建浏览器会话的上下文管理器"""
    session = BrowserSession(headless=headless, timeout_ms=timeout_ms)
    try:
        await session.start()
        yield session
    finally:
        await session.stop()
