# ===== Scraper configuration (env overridable) =====
import os


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "y", "on"}


# ===== Site / output =====
BASE_URL = os.environ.get("BASE_URL", "https://groww.in/search")
OUTPUT_DIR = os.environ.get("OUTPUT_DIR", "stock_data")
TABLE_OUTPUT_DIR = os.environ.get("TABLE_OUTPUT_DIR", "table_data")
SUMMARY_CSV_NAME = "stocks_master.csv"
PDF_SUBDIR = "pdfs"

# ===== Browser =====
# Leave CHROMIUM_PATH empty to use the Playwright-managed Chromium
CHROMIUM_PATH = os.environ.get("CHROMIUM_PATH", "")
HEADLESS = _env_flag("HEADLESS", "true")
VIEWPORT_WIDTH = int(os.environ.get("VIEWPORT_WIDTH", "1920"))
VIEWPORT_HEIGHT = int(os.environ.get("VIEWPORT_HEIGHT", "1080"))
BROWSER_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# ===== Timeouts (milliseconds) =====
NAV_TIMEOUT_MS = int(os.environ.get("NAV_TIMEOUT_MS", "60000"))
DEFAULT_TIMEOUT_MS = int(os.environ.get("DEFAULT_TIMEOUT_MS", "30000"))
SELECTOR_TIMEOUT_MS = int(os.environ.get("SELECTOR_TIMEOUT_MS", "5000"))
RESULT_TIMEOUT_MS = int(os.environ.get("RESULT_TIMEOUT_MS", "3000"))
NAVIGATION_WAIT_MS = int(os.environ.get("NAVIGATION_WAIT_MS", "10000"))
TYPE_DELAY_MS = int(os.environ.get("TYPE_DELAY_MS", "100"))

# ===== Pacing (seconds) =====
# Settle time lets client-side rendering catch up after network idle
SETTLE_TIME = float(os.environ.get("SETTLE_TIME", "2.0"))
PAGE_SETTLE_TIME = float(os.environ.get("PAGE_SETTLE_TIME", "3.0"))
TYPE_SETTLE_TIME = float(os.environ.get("TYPE_SETTLE_TIME", "1.0"))
COOKIE_SETTLE_TIME = float(os.environ.get("COOKIE_SETTLE_TIME", "1.0"))
INTER_STOCK_DELAY = float(os.environ.get("INTER_STOCK_DELAY", "2.0"))

# ===== Search result matching =====
# rapidfuzz partial_ratio score below which the first suggestion row is used
MATCH_THRESHOLD = float(os.environ.get("MATCH_THRESHOLD", "80"))

# ===== Capture toggles =====
CAPTURE_PDF = _env_flag("CAPTURE_PDF", "true")
CAPTURE_SCREENSHOT = _env_flag("CAPTURE_SCREENSHOT", "true")

# ===== ANSI color codes =====
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
CYAN = "\033[96m"
RESET = "\033[0m"
