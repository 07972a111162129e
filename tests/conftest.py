"""pytest 全局配置和 fixtures

提供测试所需的 HTML 页面样本和假抓取器。
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# 添加项目路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finspider.common.exceptions import FetchError  # noqa: E402
from finspider.crawler.fetcher import FetchResult, PageFetcher  # noqa: E402
from finspider.extractor.document import FetchedPage  # noqa: E402


# ============================================================================
# HTML 样本
# ============================================================================

BNPL_URL = "https://acme-finance.com/bnpl/flex-pay"

BNPL_HTML = """<html>
<head>
  <title>Flex Pay - Acme Finance</title>
  <meta property="og:site_name" content="Acme Finance">
</head>
<body>
  <h1>Flex Pay</h1>
  <p>Buy Now, Pay Later — 0% APR for 6 months</p>
  <div class="fee-box"><p>Late fee: $7 per missed payment</p></div>
  <section>
    <h2>Eligibility</h2>
    <p>Must be 18 or older with a valid bank account.</p>
  </section>
  <p>Monthly payment from $25.00</p>
  <script>var apr = "99%"; var contact = "hidden@acme.com";</script>
</body>
</html>
"""

LOAN_URL = "https://lender.com/loans/personal"

LOAN_HTML = """<html>
<head>
  <title>Personal Loan | Lender</title>
  <meta name="application-name" content="Lender Co">
</head>
<body>
  <h1>Personal Loan</h1>
  <p>APR from 9.99%. Loan term: 36 months.</p>
  <div id="fees">Origination fee: 1%-5%. Questions? Email support@lender.com or call +1 (555) 123-4567.</div>
  <p><strong>Who can apply:</strong> residents aged 21+. Contact jane.doe@mail.com for details.</p>
  <p>Estimated monthly payment: $322.67</p>
</body>
</html>
"""

NO_TITLE_URL = "https://example.com/about"

NO_TITLE_HTML = """<html>
<body>
  <p>Interest rate 12.5% on all balances.</p>
</body>
</html>
"""

NON_PRODUCT_URL = "https://example.com/about-us"

NON_PRODUCT_HTML = """<html>
<head><title>About us</title></head>
<body>
  <h1>About us</h1>
  <p>Our team and our history.</p>
</body>
</html>
"""

LISTING_URL = "https://lender.com/loans"

LISTING_HTML = """<html>
<head><title>Our loans</title></head>
<body>
  <h1>Our loans</h1>
  <a href="/loans/personal">Personal</a>
  <a href="/loans/auto">Auto</a>
  <a href="/loans/personal#fees">Personal fees</a>
  <a href="https://other.com/loans/partner">Partner offer</a>
  <a href="/about">About</a>
  <a href="mailto:help@lender.com">Mail us</a>
</body>
</html>
"""


@pytest.fixture
def bnpl_page() -> FetchedPage:
    return FetchedPage.from_html(BNPL_URL, BNPL_HTML)


@pytest.fixture
def loan_page() -> FetchedPage:
    return FetchedPage.from_html(LOAN_URL, LOAN_HTML)


@pytest.fixture
def no_title_page() -> FetchedPage:
    return FetchedPage.from_html(NO_TITLE_URL, NO_TITLE_HTML)


@pytest.fixture
def non_product_page() -> FetchedPage:
    return FetchedPage.from_html(NON_PRODUCT_URL, NON_PRODUCT_HTML)


@pytest.fixture
def listing_page() -> FetchedPage:
    return FetchedPage.from_html(LISTING_URL, LISTING_HTML)


@pytest.fixture
def loan_html_file(tmp_path) -> Path:
    path = tmp_path / "loan.html"
    path.write_text(LOAN_HTML, encoding="utf-8")
    return path


@pytest.fixture
def non_product_html_file(tmp_path) -> Path:
    path = tmp_path / "about.html"
    path.write_text(NON_PRODUCT_HTML, encoding="utf-8")
    return path


# ============================================================================
# 假抓取器
# ============================================================================

class FakePageFetcher(PageFetcher):
    """按 URL 返回预置 HTML；未预置的 URL 抛出 FetchError"""

    def __init__(self, pages: dict[str, str]):
        self.pages = pages
        self.fetched: list[str] = []
        self.started_with: int | None = None
        self.closed = False

    async def start(self, concurrency: int = 1) -> None:
        self.started_with = concurrency

    async def fetch(self, url: str) -> FetchResult:
        self.fetched.append(url)
        if url not in self.pages:
            raise FetchError(url, "HTTP 404")
        return FetchResult(url=url, final_url=url, html=self.pages[url], status=200)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def site_pages() -> dict[str, str]:
    """一个小站点：列表页 + 产品页（/loans/auto 故意缺失）"""
    return {
        LISTING_URL: LISTING_HTML,
        LOAN_URL: LOAN_HTML,
    }


@pytest.fixture
def fake_fetcher(site_pages) -> FakePageFetcher:
    return FakePageFetcher(site_pages)


# ============================================================================
# 临时目录 Fixture
# ============================================================================

@pytest.fixture
def temp_output_dir(tmp_path):
    """创建临时输出目录"""
    output_dir = tmp_path / "output"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
