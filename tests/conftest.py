"""
Shared fixtures: rendered-page HTML samples and fake Playwright objects.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

_ROW = (
    '<tr class="col l6 ft785RightSpace">'
    '<td class="ft785Head left-align contentSecondary bodyBase">{key}</td>'
    '<td class="ft785Value right-align contentPrimary bodyLargeHeavy">{value}</td>'
    "</tr>"
)

SAMPLE_ROWS = [
    ("Market Cap", "₹13,13,764Cr"),
    ("ROE", "46.74%"),
    ("P/E Ratio(TTM)", "26.94"),
    ("EPS(TTM)", "134.78"),
    ("P/B Ratio", "12.97"),
    ("Dividend Yield", "2.01%"),
    ("Industry P/E", "29.38"),
    ("Book Value", "279.87"),
    ("Debt to Equity", "0.09"),
    ("Face Value", "1"),
]


def tbody_html(rows=SAMPLE_ROWS) -> str:
    return '<tbody class="">' + "".join(_ROW.format(key=k, value=v) for k, v in rows) + "</tbody>"


def page_html(body: str) -> str:
    return (
        "<html><head><title>Stock page</title>"
        "<script>var Market_Cap = function() { return 1; };</script></head>"
        f"<body>{body}</body></html>"
    )


@pytest.fixture
def sample_tbody_page():
    """The fundamentals block of a stock page: one table holding the ten-row tbody."""
    return page_html(f"<table>{tbody_html()}</table>")


@pytest.fixture
def div_grid_page():
    return page_html(
        '<div class="stats">'
        '<div class="statsRow"><div class="statsLabel">Mcap</div><div class="statsValue">₹2,00,000Cr</div></div>'
        '<div class="statsRow"><div class="statsLabel">PE Ratio</div><div class="statsValue">31.2</div></div>'
        '<div class="statsRow"><div class="statsLabel">Sector P/E</div><div class="statsValue">28.1</div></div>'
        "</div>"
    )


@pytest.fixture
def free_text_page():
    return page_html(
        "<section>"
        "<div><span>ROCE</span><span>  58.2 %  </span></div>"
        "<div><p>Book Value</p><p></p><p>₹ 1,245.50</p></div>"
        "</section>"
    )


@pytest.fixture
def trading_page():
    return page_html(
        '<div class="quote">'
        '<span class="currText">₹4,012.35</span>'
        '<div class="dayRange"><span class="day-high">High</span><span>4,050.00</span></div>'
        '<div class="dayRange"><span class="day-low">Low</span><span>3,980.10</span></div>'
        '<div><span id="volume-label">Volume</span><span>12,34,567</span></div>'
        "</div>"
    )


@pytest.fixture
def fake_page():
    """A Playwright page stand-in whose awaitables all succeed."""
    page = MagicMock()
    for name in (
        "goto", "wait_for_selector", "wait_for_load_state", "click", "type",
        "evaluate", "query_selector", "query_selector_all", "pdf", "screenshot", "content",
    ):
        setattr(page, name, AsyncMock())
    page.url = "https://groww.in/stocks/tata-consultancy-services-ltd"
    return page


@pytest.fixture
def fake_session(fake_page):
    """(playwright, browser, context) triple handing out fake_page."""
    p = MagicMock()
    p.stop = AsyncMock()
    browser = MagicMock()
    browser.close = AsyncMock()
    context = MagicMock()
    context.new_page = AsyncMock(return_value=fake_page)
    return p, browser, context
