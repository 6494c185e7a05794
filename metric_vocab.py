# ===== Metric vocabulary, aliases and selector tables =====
from types import MappingProxyType

# Canonical metric names, in summary-column order
CANONICAL_METRICS = (
    "Market Cap",
    "P/E Ratio",
    "ROE",
    "EPS",
    "Dividend Yield",
    "Book Value",
    "ROCE",
    "Debt to Equity",
    "Face Value",
    "Industry P/E",
    "P/B Ratio",
)

URL_COLUMN = "URL"
STOCK_COLUMN = "Stock"

# Aggregate summary columns after the leading Stock column
SUMMARY_COLUMNS = (URL_COLUMN,) + CANONICAL_METRICS

# Raw spelling -> canonical name. Declaration order breaks length ties.
KEY_ALIASES = MappingProxyType({
    "Market Capitalization": "Market Cap",
    "Mcap": "Market Cap",
    "P/E": "P/E Ratio",
    "PE Ratio": "P/E Ratio",
    "PE": "P/E Ratio",
    "Price to Earning": "P/E Ratio",
    "Return on Equity": "ROE",
    "Earning Per Share": "EPS",
    "Earnings Per Share": "EPS",
    "Dividend Yield %": "Dividend Yield",
    "Div Yield": "Dividend Yield",
    "Book Val": "Book Value",
    "BookValue": "Book Value",
    "BV": "Book Value",
    "Return on Capital Employed": "ROCE",
    "Debt/Equity": "Debt to Equity",
    "Debt-Equity": "Debt to Equity",
    "D/E Ratio": "Debt to Equity",
    "Face Val": "Face Value",
    "FV": "Face Value",
    "Industry PE": "Industry P/E",
    "Sector P/E": "Industry P/E",
    "Price to Book Value": "P/B Ratio",
    "Price/Book": "P/B Ratio",
    "PB Ratio": "P/B Ratio",
})

# Trading-info label -> class/id substrings that mark its element
TRADING_METRICS = MappingProxyType({
    "High": ("day-high", "high", "High"),
    "Low": ("day-low", "low", "Low"),
    "Open": ("open", "Open"),
    "Previous Close": ("prev-close", "previousClose", "Previous Close"),
    "Volume": ("volume", "Volume"),
    "52W High": ("52w-high", "52wHigh", "52W High", "52-Week High"),
    "52W Low": ("52w-low", "52wLow", "52W Low", "52-Week Low"),
})

CURRENT_PRICE_SELECTOR = '.currText, .current-price, [class*="price"], [class*="Price"]'

# Substrings that mark scraped text as embedded script rather than a value
CODE_FRAGMENTS = ("function(", "var ", "const ", "if (", "for (", "Promise.")

# Class/id markers for the labeled-div strategy
ROW_MARKERS = ("row", "Row")
KEY_MARKERS = ("key", "Key", "label", "Label")
VALUE_MARKERS = ("value", "Value")

# Subtrees never scanned for free-text labels
NON_CONTENT_TAGS = ("head", "script", "style", "noscript", "template")
