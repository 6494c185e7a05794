"""
Tests for the indicator loader and the chat session, with a mocked OpenAI client.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

import analyst_chat
from analyst_chat import (
    INDICATOR_FIELDS,
    INITIAL_REQUEST,
    AnalystChat,
    build_analysis_prompt,
    filter_stocks,
    load_indicator_csv,
    make_client,
)


def completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def client():
    c = MagicMock()
    c.chat.completions.create.return_value = completion("**Hold.** Momentum is flat.")
    return c


@pytest.fixture
def stock():
    return {"symbol": "TCS", **{column: default for column, _, default in INDICATOR_FIELDS}, "rsi": 61.5}


class TestIndicatorCsv:
    def test_defaults_fill_gaps(self, tmp_path):
        path = tmp_path / "nifty50_data.csv"
        path.write_text(
            "symbol,current_price,rsi,current_trend\n"
            "TCS,4012.35,61.5,Uptrend\n"
            "INFY,,abc,\n"
            ",1,2,3\n",
            encoding="utf-8",
        )
        stocks = load_indicator_csv(str(path))
        assert [s["symbol"] for s in stocks] == ["TCS", "INFY"]
        assert stocks[0]["current_price"] == 4012.35
        assert stocks[0]["current_trend"] == "Uptrend"
        assert stocks[1]["current_price"] == 0.0
        assert stocks[1]["rsi"] == 0.0
        assert stocks[1]["current_trend"] == "Unknown"
        assert stocks[1]["support_resistance"] == "{}"

    def test_filter(self):
        stocks = [{"symbol": "TCS"}, {"symbol": "TATASTEEL"}, {"symbol": "INFY"}]
        assert [s["symbol"] for s in filter_stocks(stocks, "ta")] == ["TATASTEEL"]
        assert len(filter_stocks(stocks, "")) == 3


class TestPrompt:
    def test_every_indicator_is_listed(self, stock):
        prompt = build_analysis_prompt(stock)
        assert prompt.startswith("Analyze stock TCS with the following indicators:")
        for _, label, _ in INDICATOR_FIELDS:
            assert f"- {label}:" in prompt
        assert "- RSI: 61.5" in prompt
        assert "Buy/Sell/Hold" in prompt
        assert prompt.endswith("Format the response in Markdown.")


class TestAnalystChat:
    """History handling around the completions API."""

    def test_start_sends_initial_request(self, stock, client):
        chat = AnalystChat(stock, client=client, model="test-model")
        reply = chat.start()

        assert reply == "**Hold.** Momentum is flat."
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"][0]["content"] == build_analysis_prompt(stock)
        assert kwargs["messages"][1] == {"role": "user", "content": INITIAL_REQUEST}
        assert chat.transcript == [{"role": "assistant", "content": reply}]

    def test_follow_up_carries_history(self, stock, client):
        chat = AnalystChat(stock, client=client, model="test-model")
        chat.start()
        client.chat.completions.create.return_value = completion("RSI is 61.5.")
        chat.send("What is the RSI?")

        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["user", "user", "assistant", "user", "assistant"]
        assert [m["content"] for m in chat.transcript] == [
            "**Hold.** Momentum is flat.", "What is the RSI?", "RSI is 61.5.",
        ]

    def test_model_from_environment(self, stock, client, monkeypatch):
        monkeypatch.setenv("OPENAI_MODEL", "env-model")
        assert AnalystChat(stock, client=client).model == "env-model"

    def test_api_errors_propagate(self, stock, client):
        client.chat.completions.create.side_effect = RuntimeError("rate limited")
        chat = AnalystChat(stock, client=client)
        with pytest.raises(RuntimeError):
            chat.start()


class TestMakeClient:
    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
            make_client()

    def test_default_endpoint(self, monkeypatch):
        created = {}
        monkeypatch.setattr(analyst_chat, "OpenAI", lambda **kw: created.update(kw) or "client")
        monkeypatch.delenv("OPENAI_API_BASE", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert make_client() == "client"
        assert created == {"api_key": "sk-env"}

    def test_base_url(self, monkeypatch):
        created = {}
        monkeypatch.setattr(analyst_chat, "OpenAI", lambda **kw: created.update(kw) or "client")
        monkeypatch.setenv("OPENAI_API_BASE", "http://localhost:8000/v1")
        assert make_client("sk-test") == "client"
        assert created == {"api_key": "sk-test", "base_url": "http://localhost:8000/v1"}
