"""
Tests for market data collaborators, configuration and analysis.
"""

from datetime import datetime
from types import SimpleNamespace

import httpx
import numpy as np
import openai
import pandas as pd
import pytest

from prosperedge.analysis import (
    DOWNTREND,
    SIDEWAYS,
    UNAVAILABLE_MESSAGE,
    UPTREND,
    OpenAIAnalyst,
    TemplateAnalyst,
    trend_label,
)
from prosperedge.config import (
    FINNHUB_KEY_ENV,
    MOCK_SEED_ENV,
    OPENAI_KEY_ENV,
    OPENAI_MODEL_ENV,
    AppMode,
    analyst_from_env,
    market_data_from_env,
    resolve_mode,
)
from prosperedge.market import CANDLE_COLUMNS, FinnhubMarketData, Quote, SyntheticMarketData, TimeRange

NOW = datetime(2024, 3, 1, 12, 0, 0)


# --- SyntheticMarketData ---


@pytest.mark.parametrize("time_range, bars", [(TimeRange.DAY, 8), (TimeRange.MONTH, 31), (TimeRange.YEAR, 366)])
def test_synthetic_candle_counts(time_range, bars):
    df = SyntheticMarketData(seed=1, now=NOW).get_candles("AAPL", time_range)
    assert len(df) == bars
    assert list(df.columns) == list(CANDLE_COLUMNS)
    assert isinstance(df.index, pd.DatetimeIndex)
    assert df.index.name == "datetime"
    assert df.index[-1] == pd.Timestamp("2024-03-01")
    assert df.attrs["symbol"] == "AAPL"


def test_synthetic_candles_are_consistent():
    df = SyntheticMarketData(seed=3, now=NOW).get_candles("AAPL", "1Y")
    assert (df["high"] >= df[["open", "close"]].max(axis=1)).all()
    assert (df["low"] <= df[["open", "close"]].min(axis=1)).all()
    assert (df["volume"] >= 500_000).all()
    gaps = np.abs(df["open"].iloc[1:].values - df["close"].iloc[:-1].values)
    assert gaps.max() <= df["close"].max() * 0.01


def test_synthetic_is_reproducible_by_seed():
    a = SyntheticMarketData(seed=42, now=NOW).get_candles("AAPL", TimeRange.MONTH)
    b = SyntheticMarketData(seed=42, now=NOW).get_candles("AAPL", TimeRange.MONTH)
    pd.testing.assert_frame_equal(a, b)


def test_synthetic_quote_range():
    provider = SyntheticMarketData(seed=7)
    for _ in range(20):
        q = provider.get_quote("NVDA")
        assert 100.0 <= q.price <= 200.0
        assert -2.5 <= q.change <= 2.5
        assert q.name == "NVDA Corp (Mock)"


def test_latest_prices():
    prices = SyntheticMarketData(seed=0).latest_prices(["AAPL", "MSFT"])
    assert set(prices) == {"AAPL", "MSFT"}


# --- FinnhubMarketData ---


def _finnhub(handler) -> FinnhubMarketData:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return FinnhubMarketData(
        "secret",
        client=client,
        fallback=SyntheticMarketData(seed=0, now=NOW),
        clock=lambda: NOW,
    )


def test_finnhub_quote():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/quote"
        assert request.url.params["symbol"] == "AAPL"
        assert request.url.params["token"] == "secret"
        return httpx.Response(200, json={"c": 181.5, "d": 1.25, "dp": 0.69})

    assert _finnhub(handler).get_quote("AAPL") == Quote(
        symbol="AAPL", price=181.5, change=1.25, change_percent=0.69, name="AAPL"
    )


def test_finnhub_quote_error_returns_zero_quote():
    provider = _finnhub(lambda request: httpx.Response(500))
    q = provider.get_quote("AAPL")
    assert q.price == 0.0
    assert provider.latest_prices(["AAPL"]) == {}


def test_finnhub_candles():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "s": "ok",
                "t": [1709164800, 1709251200],
                "o": [100, 101], "h": [102, 103], "l": [99, 100], "c": [101, 102], "v": [1000, 2000],
            },
        )

    df = _finnhub(handler).get_candles("AAPL", TimeRange.MONTH)
    assert seen["resolution"] == "D"
    assert int(seen["to"]) - int(seen["from"]) == 2_592_000
    assert list(df.columns) == list(CANDLE_COLUMNS)
    assert df.index.name == "datetime"
    assert df["close"].tolist() == [101.0, 102.0]
    assert df.index[0] == pd.Timestamp("2024-02-29")


def test_finnhub_intraday_resolution():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"s": "no_data"})

    _finnhub(handler).get_candles("AAPL", TimeRange.DAY)
    assert seen["resolution"] == "60"
    assert int(seen["to"]) - int(seen["from"]) == 86_400


def test_finnhub_candles_fall_back_to_synthetic_month():
    df = _finnhub(lambda request: httpx.Response(200, json={"s": "no_data"})).get_candles("AAPL", TimeRange.YEAR)
    assert len(df) == 31


def test_finnhub_transport_error_falls_back():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    df = _finnhub(handler).get_candles("AAPL", TimeRange.MONTH)
    assert len(df) == 31


# --- Config ---


def test_resolve_mode():
    assert resolve_mode({}) == AppMode.MOCK
    assert resolve_mode({FINNHUB_KEY_ENV: "  "}) == AppMode.MOCK
    assert resolve_mode({FINNHUB_KEY_ENV: "abc"}) == AppMode.REAL


def test_market_data_from_env():
    assert isinstance(market_data_from_env({MOCK_SEED_ENV: "5"}), SyntheticMarketData)
    provider = market_data_from_env({FINNHUB_KEY_ENV: "abc"})
    assert isinstance(provider, FinnhubMarketData)
    provider.close()


def test_resolve_mode_reads_environment(monkeypatch):
    monkeypatch.delenv(FINNHUB_KEY_ENV, raising=False)
    assert resolve_mode() == AppMode.MOCK
    monkeypatch.setenv(FINNHUB_KEY_ENV, "abc")
    assert resolve_mode() == AppMode.REAL


# --- Analysis ---


def _closes(values):
    return pd.DataFrame({"close": values}, index=pd.date_range("2024-01-01", periods=len(values), freq="D"))


def test_trend_label():
    assert trend_label(_closes([100, 105])) == UPTREND
    assert trend_label(_closes([100, 95])) == DOWNTREND
    assert trend_label(_closes([100, 100.5])) == SIDEWAYS
    assert trend_label(pd.DataFrame()) == SIDEWAYS


def test_template_analyst_is_deterministic():
    analyst = TemplateAnalyst()
    text = analyst.analyze("AAPL", 181.5, UPTREND)
    assert "AAPL" in text
    assert "181.50" in text
    assert UPTREND in text
    assert text == analyst.analyze("AAPL", 181.5, UPTREND)


class _FakeCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(completions: _FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_openai_analyst_sends_prompt_and_returns_reply():
    completions = _FakeCompletions(reply="  Hold for now.  ")
    analyst = OpenAIAnalyst(client=_fake_client(completions), model="test-model")
    assert analyst.analyze("AAPL", 181.5, UPTREND) == "Hold for now."
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert call["messages"][0]["role"] == "system"
    assert "AAPL" in call["messages"][1]["content"]
    assert "181.50" in call["messages"][1]["content"]
    assert UPTREND in call["messages"][1]["content"]


def test_openai_analyst_error_returns_fixed_message(caplog):
    completions = _FakeCompletions(error=openai.OpenAIError("quota exceeded"))
    analyst = OpenAIAnalyst(client=_fake_client(completions))
    assert analyst.analyze("AAPL", 181.5, UPTREND) == UNAVAILABLE_MESSAGE
    assert "quota exceeded" in caplog.text


def test_openai_analyst_empty_reply_returns_fixed_message():
    analyst = OpenAIAnalyst(client=_fake_client(_FakeCompletions(reply=None)))
    assert analyst.analyze("AAPL", 1.0, SIDEWAYS) == UNAVAILABLE_MESSAGE


def test_analyst_from_env():
    assert isinstance(analyst_from_env({}), TemplateAnalyst)
    assert isinstance(analyst_from_env({OPENAI_KEY_ENV: " "}), TemplateAnalyst)
    analyst = analyst_from_env({OPENAI_KEY_ENV: "sk-test", OPENAI_MODEL_ENV: "gpt-test"})
    assert isinstance(analyst, OpenAIAnalyst)
    assert analyst.model == "gpt-test"


# --- Resource handling ---


def test_finnhub_context_manager_closes_own_client():
    with market_data_from_env({FINNHUB_KEY_ENV: "abc"}) as provider:
        assert isinstance(provider, FinnhubMarketData)
        client = provider._client
    assert client.is_closed


def test_finnhub_leaves_injected_client_open():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
    with FinnhubMarketData("secret", client=client):
        pass
    assert not client.is_closed
    client.close()


def test_synthetic_context_manager():
    with SyntheticMarketData(seed=0) as provider:
        assert provider.get_quote("AAPL").price > 0
