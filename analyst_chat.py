# ===== Indicator chat: CSV loading, analysis prompt, model session =====
import os

import pandas as pd
from openai import OpenAI

DEFAULT_MODEL = "gpt-4.1-nano-2025-04-14"
INITIAL_REQUEST = "Provide an initial analysis"

# (column, prompt label, default)
INDICATOR_FIELDS = [
    ("current_price", "Current Price", 0.0),
    ("price_change", "Price Change", 0.0),
    ("percent_change", "Percent Change", 0.0),
    ("volatility", "Volatility", 0.0),
    ("sharpe_ratio", "Sharpe Ratio", 0.0),
    ("skewness", "Skewness", 0.0),
    ("kurtosis", "Kurtosis", 0.0),
    ("current_trend", "Current Trend", "Unknown"),
    ("trend_strength", "Trend Strength", "Unknown"),
    ("adx", "ADX", 0.0),
    ("rsi", "RSI", 0.0),
    ("macd", "MACD", 0.0),
    ("macd_signal", "MACD Signal", 0.0),
    ("macd_histogram", "MACD Histogram", 0.0),
    ("stochastic_k", "Stochastic K", 0.0),
    ("stochastic_d", "Stochastic D", 0.0),
    ("bollinger_width", "Bollinger Width", 0.0),
    ("atr", "ATR", 0.0),
    ("sma_20", "SMA 20", 0.0),
    ("sma_50", "SMA 50", 0.0),
    ("sma_200", "SMA 200", 0.0),
    ("ema_12", "EMA 12", 0.0),
    ("ema_26", "EMA 26", 0.0),
    ("support_resistance", "Support & Resistance", "{}"),
    ("trading_signals", "Trading Signals", "[]"),
    ("momentum_14", "Momentum 14", 0.0),
    ("momentum_30", "Momentum 30", 0.0),
]


def _coerce(raw, default):
    if isinstance(default, float):
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return default
        # NaN never equals itself
        return value if value == value else default
    text = "" if raw is None else str(raw).strip()
    return text or default


def load_indicator_csv(csv_path: str) -> list[dict]:
    """
    Load precomputed indicators, one dict per stock.
    Missing numbers become 0, missing text its placeholder; rows without a symbol are dropped.
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    stocks = []
    for _, row in df.iterrows():
        symbol = str(row.get("symbol", "")).strip()
        if not symbol:
            continue
        stock = {"symbol": symbol}
        for column, _, default in INDICATOR_FIELDS:
            stock[column] = _coerce(row.get(column), default)
        stocks.append(stock)
    return stocks


def filter_stocks(stocks: list[dict], query: str) -> list[dict]:
    q = (query or "").strip().lower()
    return [s for s in stocks if q in s["symbol"].lower()]


def build_analysis_prompt(stock: dict) -> str:
    """Fixed instruction prompt embedding every indicator of one stock."""
    lines = [f"Analyze stock {stock['symbol']} with the following indicators:"]
    for column, label, default in INDICATOR_FIELDS:
        lines.append(f"- {label}: {stock.get(column, default)}")
    lines.append("")
    lines.append("Provide a detailed analysis and trading recommendation.")
    lines.append("The example format is as follows:")
    lines.append("Recommendation:")
    lines.append("- Tell if user should Buy/Sell/Hold the stock. Keep the summary short and to the point.")
    lines.append("Context:")
    lines.append("- Provide a brief analysis of the stock and why you suggest what you did. Also give the "
                 "indicators the user should look into which you used for the analysis.")
    lines.append("- Disclaimer that you are just an LLM and not a financial advisor.")
    lines.append("")
    lines.append("Format the response in Markdown.")
    return "\n".join(lines)


def make_client(api_key: str | None = None) -> OpenAI:
    key = api_key or os.environ.get("OPENAI_API_KEY")
    if not key:
        raise RuntimeError("No API key for the chat model: pass one or export OPENAI_API_KEY.")
    kwargs = {"api_key": key}
    # OPENAI_API_BASE points the client at a compatible self-hosted endpoint
    if os.environ.get("OPENAI_API_BASE"):
        kwargs["base_url"] = os.environ["OPENAI_API_BASE"]
    return OpenAI(**kwargs)


class AnalystChat:
    """Chat session about one stock. History is seeded with the analysis prompt."""

    def __init__(self, stock: dict, client=None, model: str | None = None):
        self.stock = stock
        self.client = client if client is not None else make_client()
        self.model = model or os.environ.get("OPENAI_MODEL", DEFAULT_MODEL)
        self.history: list[dict[str, str]] = [{"role": "user", "content": build_analysis_prompt(stock)}]
        self._hidden = 1

    @property
    def transcript(self) -> list[dict[str, str]]:
        # seeded prompt and initial request are not shown to the user
        return self.history[self._hidden:]

    def send(self, text: str) -> str:
        self.history.append({"role": "user", "content": text})
        resp = self.client.chat.completions.create(model=self.model, messages=self.history, temperature=0.2)
        reply = (resp.choices[0].message.content or "").strip()
        self.history.append({"role": "assistant", "content": reply})
        return reply

    def start(self) -> str:
        self._hidden = len(self.history) + 1
        return self.send(INITIAL_REQUEST)
