# ===== Playwright bridge: browser session + search-box automation =====
import asyncio

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright
from rapidfuzz import fuzz, process

from scrape_config import (
    BROWSER_ARGS,
    CHROMIUM_PATH,
    COOKIE_SETTLE_TIME,
    CYAN,
    DEFAULT_TIMEOUT_MS,
    GREEN,
    HEADLESS,
    MATCH_THRESHOLD,
    NAV_TIMEOUT_MS,
    NAVIGATION_WAIT_MS,
    RED,
    RESET,
    RESULT_TIMEOUT_MS,
    SELECTOR_TIMEOUT_MS,
    SETTLE_TIME,
    TYPE_DELAY_MS,
    TYPE_SETTLE_TIME,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
    YELLOW,
)

# ===== Selector cascades (tried in order) =====
COOKIE_SELECTORS = [
    'button[aria-label="Accept"]',
    'button:has-text("Accept")',
    ".cookie-consent-accept",
    'button:has-text("I agree")',
    "button.accept-cookies",
]

SEARCH_TRIGGER_SELECTORS = [
    (".sp23SearchBox", "search box"),
    (".sp23SearchIcon", "search icon"),
    ("svg.se27SeSearch", "SVG search icon"),
    ('input#sp23Input, input#globalSearch23, input[placeholder*="Search"]', "search input field"),
]

SEARCH_INPUT_SELECTORS = [
    'input[id="globalSearch23"]',
    'input[placeholder*="Search"]',
    'input[placeholder*="search"]',
    'input[class*="search"]',
    'input[class*="Search"]',
    'input[aria-label*="Search"]',
    ".text-input-v1-primary-input",
    "input.inputTextColor",
    'input[type="search"]',
    'input[id*="search"]',
    'input[id*="Search"]',
]

RESULT_CONTAINER_SELECTOR = '.sp23SuggestionPageUi, div[class*="SuggestionPage"]'
RESULT_ROW_SELECTOR = '.sp23SuggestionPageDataRow, div[id^="suggestions"]'

# Returns a selector for the first input that looks like a search box, or null
FIND_SEARCH_INPUT_JS = """
() => {
  for (const input of Array.from(document.querySelectorAll('input'))) {
    const placeholder = (input.getAttribute('placeholder') || '').toLowerCase();
    const className = (input.className || '').toLowerCase();
    const id = (input.id || '').toLowerCase();
    const ariaLabel = (input.getAttribute('aria-label') || '').toLowerCase();
    if (placeholder.includes('search') || className.includes('search') ||
        id.includes('search') || ariaLabel.includes('search') || input.type === 'search') {
      if (input.id) return '#' + input.id;
      if (input.className) return '.' + input.className.trim().split(/\\s+/).join('.');
      return 'input[placeholder="' + input.getAttribute('placeholder') + '"]';
    }
  }
  return null;
}
"""

CLEAR_INPUT_JS = "(selector) => { const el = document.querySelector(selector); if (el) el.value = ''; }"


# ===== Session lifecycle =====
async def init_browser(headless=None):
    """Start Playwright, launch Chromium and open one context. Returns (p, browser, context)."""
    p = await async_playwright().start()
    launch_kwargs = {
        "headless": HEADLESS if headless is None else headless,
        "args": BROWSER_ARGS,
    }
    if CHROMIUM_PATH:
        launch_kwargs["executable_path"] = CHROMIUM_PATH
    browser = await p.chromium.launch(**launch_kwargs)
    context = await browser.new_context(viewport={"width": VIEWPORT_WIDTH, "height": VIEWPORT_HEIGHT})
    context.set_default_timeout(DEFAULT_TIMEOUT_MS)
    return p, browser, context


async def shutdown(p, browser):
    try:
        await browser.close()
    finally:
        await p.stop()


# ===== Navigation + waiting =====
async def goto(page, url: str):
    print(f"{CYAN}🌐 Navigating to {url}...{RESET}")
    return await page.goto(url, wait_until="networkidle", timeout=NAV_TIMEOUT_MS)


async def settle(page, seconds=None, timeout_ms: int = NAVIGATION_WAIT_MS):
    """Wait (bounded) for network idle, then give client-side rendering its settle time."""
    try:
        await page.wait_for_load_state("networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError:
        print(f"{YELLOW}⚠ Network did not go idle within {timeout_ms} ms, continuing...{RESET}")
    await asyncio.sleep(SETTLE_TIME if seconds is None else seconds)


async def first_matching_selector(page, selectors, timeout_ms: int = SELECTOR_TIMEOUT_MS):
    """Try each selector in order; return the first that appears, else None."""
    for selector in selectors:
        try:
            await page.wait_for_selector(selector, timeout=timeout_ms)
            return selector
        except PlaywrightTimeoutError:
            continue
    return None


# ===== Search-box automation =====
async def accept_cookies(page):
    """Click a consent button if one is present. Returns True when clicked."""
    for selector in COOKIE_SELECTORS:
        button = await page.query_selector(selector)
        if button:
            await button.click()
            await asyncio.sleep(COOKIE_SETTLE_TIME)
            print(f"{GREEN}✅ Accepted cookie banner ({selector}){RESET}")
            return True
    return False


async def find_and_click_search(page):
    for selector, label in SEARCH_TRIGGER_SELECTORS:
        try:
            await page.wait_for_selector(selector, timeout=SELECTOR_TIMEOUT_MS)
            await page.click(selector)
            print(f"🔎 Clicked on the {label}")
            return selector
        except PlaywrightTimeoutError as e:
            print(f"{YELLOW}⚠ Could not find the {label} ({selector}): {e}{RESET}")
    raise RuntimeError("Could not find or click the search feature")


async def wait_for_search_input(page) -> str:
    selector = await first_matching_selector(page, SEARCH_INPUT_SELECTORS)
    if selector:
        print(f"🔎 Found search input using selector: {selector}")
        return selector

    selector = await page.evaluate(FIND_SEARCH_INPUT_JS)
    if not selector:
        raise RuntimeError("Could not find search input field")
    print(f"🔎 Found search input by attributes: {selector}")
    return selector


async def type_in_search_input(page, symbol: str) -> str:
    selector = await wait_for_search_input(page)
    await page.evaluate(CLEAR_INPUT_JS, selector)
    await page.type(selector, symbol, delay=TYPE_DELAY_MS)
    print(f'⌨️  Typed "{symbol}" in search input')
    await asyncio.sleep(TYPE_SETTLE_TIME)
    return selector


def pick_search_result(symbol: str, texts, threshold: float = MATCH_THRESHOLD) -> int:
    """
    Index of the suggestion row that best matches the symbol.
    Falls back to the first row when nothing scores above threshold.
    """
    if not texts:
        return -1
    choices = {i: str(t).upper() for i, t in enumerate(texts)}
    best = process.extractOne(symbol.upper(), choices, scorer=fuzz.partial_ratio)
    if best and best[1] >= threshold:
        return best[2]
    return 0


async def click_search_result(page, symbol: str):
    await page.wait_for_selector(RESULT_CONTAINER_SELECTOR, timeout=SELECTOR_TIMEOUT_MS)
    print("🔎 Search results appeared")
    await page.wait_for_selector(RESULT_ROW_SELECTOR, timeout=RESULT_TIMEOUT_MS)

    rows = await page.query_selector_all(RESULT_ROW_SELECTOR)
    texts = [await row.inner_text() for row in rows]
    idx = pick_search_result(symbol, texts)
    if idx < 0:
        raise RuntimeError(f"No search results for {symbol}")

    await rows[idx].click()
    print(f"{GREEN}✅ Clicked search result {idx + 1}/{len(rows)} for {symbol}{RESET}")
    await settle(page)


# ===== Captures =====
async def save_pdf(page, file_path: str) -> bool:
    try:
        await page.pdf(
            path=file_path,
            format="A4",
            print_background=True,
            margin={"top": "20px", "right": "20px", "bottom": "20px", "left": "20px"},
        )
        print(f"📄 PDF saved to {file_path}")
        return True
    except Exception as e:
        # page.pdf only works in headless Chromium; a failed capture never stops the run
        print(f"{RED}❌ Error saving PDF: {e}{RESET}")
        return False


async def save_screenshot(page, file_path: str) -> str:
    await page.screenshot(path=file_path)
    print(f"📸 Screenshot saved to {file_path}")
    return file_path
