"""浏览器模块"""

from .session import BrowserSession, create_browser_session

__all__ = [
    "BrowserSession",
    "create_browser_session",
]
