# ===== Stock universe: built-in lists + ticker loading =====
import re

import pandas as pd

# Nifty 50 constituents (as of February 2025)
NIFTY_50_STOCKS = [
    'ADANIPORTS', 'ASIANPAINT', 'AXISBANK', 'BAJAJ-AUTO', 'BAJFINANCE',
    'BAJAJFINSV', 'BPCL', 'BHARTIARTL', 'BRITANNIA', 'CIPLA',
    'COALINDIA', 'DRREDDY', 'EICHERMOT', 'GRASIM',
    'HCLTECH', 'HDFCBANK', 'HDFCLIFE', 'HEROMOTOCO', 'HINDALCO',
    'HINDUNILVR', 'ICICIBANK', 'ITC', 'INDUSINDBK', 'INFY',
    'JSWSTEEL', 'KOTAKBANK', 'LT', 'M&M', 'MARUTI',
    'NTPC', 'NESTLEIND', 'ONGC', 'POWERGRID', 'RELIANCE',
    'SBILIFE', 'SBIN', 'SUNPHARMA', 'TCS', 'TATACONSUM',
    'TATAMOTORS', 'TATASTEEL', 'TECHM', 'TITAN', 'UPL',
    'ULTRACEMCO', 'WIPRO',
]

ADDITIONAL_STOCKS = ['ADANIENT', 'APOLLOHOSP', 'BEL', 'SHRIRAMFIN', 'TRENT']

ALL_STOCKS = NIFTY_50_STOCKS + ADDITIONAL_STOCKS

TICKER_COLUMNS = ("Stock", "Ticker", "Symbol", "symbol")


def sanitize_symbol(ticker: str) -> str:
    """Upper-case, drop exchange suffix (.NS/.BO); keep & and - (M&M, BAJAJ-AUTO)."""
    if not isinstance(ticker, str):
        return ""
    core = ticker.strip().upper()
    if "." in core:
        core = core.split(".", 1)[0]
    core = re.sub(r"[^A-Z0-9&\-]", "", core)
    # Numeric-only codes are BSE scrip codes, not searchable tickers
    if core.isdigit():
        return ""
    return core


def unique_symbols(raw_symbols) -> list[str]:
    uniq, seen = [], set()
    for raw in raw_symbols:
        sym = sanitize_symbol(raw)
        if not sym or sym in seen:
            continue
        seen.add(sym)
        uniq.append(sym)
    return uniq


def parse_ticker_input(text: str) -> list[str]:
    parts = [p for p in re.split(r"[,\s]+", text or "") if p]
    return unique_symbols(parts)


def load_universe_csv(csv_path: str) -> list[str]:
    df = pd.read_csv(csv_path, dtype=str).fillna("")
    column = next((c for c in TICKER_COLUMNS if c in df.columns), None)
    if column is None:
        raise RuntimeError(f"CSV {csv_path} has no ticker column (expected one of {', '.join(TICKER_COLUMNS)}).")
    return unique_symbols(df[column].tolist())
