"""
Analyst: narrative commentary for a symbol.

Advisory only. Nothing here feeds back into the ledger.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import openai
import pandas as pd
from openai import OpenAI

logger = logging.getLogger(__name__)

UPTREND = "uptrend"
DOWNTREND = "downtrend"
SIDEWAYS = "sideways"

DEFAULT_MODEL = "gpt-4o-mini"
UNAVAILABLE_MESSAGE = "Analysis service is temporarily unavailable. Please try again later."
SYSTEM_PROMPT = "You are a professional financial analyst."
ANALYST_PROMPT = (
    "Give a short investment analysis and recommendation for ticker {symbol} "
    "(current price: {price:,.2f}, recent trend: {trend}). Reply in plain text without "
    "Markdown, bold text or headings. Include a summary, risk notes and a suggested course of action."
)


def trend_label(candles: pd.DataFrame, *, threshold_pct: float = 1.0) -> str:
    """
    Label the move from first to last close. Moves within threshold_pct
    either way are sideways; empty frames are sideways too.
    """
    if candles.empty or "close" not in candles.columns:
        return SIDEWAYS
    first = float(candles["close"].iloc[0])
    last = float(candles["close"].iloc[-1])
    if first <= 0:
        return SIDEWAYS
    change_pct = (last - first) / first * 100.0
    if change_pct > threshold_pct:
        return UPTREND
    if change_pct < -threshold_pct:
        return DOWNTREND
    return SIDEWAYS


class Analyst(ABC):
    """Produces free-text commentary from a symbol, its price and a trend label."""

    @abstractmethod
    def analyze(self, symbol: str, price: float, trend: str) -> str:
        ...


class TemplateAnalyst(Analyst):
    """Offline analyst: fills a fixed template. Same inputs give the same text."""

    def analyze(self, symbol: str, price: float, trend: str) -> str:
        return (
            f"[Mock analysis] {symbol}\n"
            f"\n"
            f"1. Technicals: trading at {price:,.2f} in a {trend}. Momentum reads neutral to firm.\n"
            f"2. Fundamentals: recent results are steady and revenue growth is in line with expectations.\n"
            f"3. Suggestion: range trading in the short term, watching recent lows as support. "
            f"Long-term investors may scale in gradually.\n"
            f"\n"
            f"(Generated offline. Configure an API key for live commentary.)"
        )


class OpenAIAnalyst(Analyst):
    """
    Commentary from an OpenAI chat model.

    API failures and empty replies are logged and answered with
    UNAVAILABLE_MESSAGE; analyze never raises for them.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: OpenAI | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
    ) -> None:
        self._client = client or OpenAI(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens

    def analyze(self, symbol: str, price: float, trend: str) -> str:
        prompt = ANALYST_PROMPT.format(symbol=symbol, price=price, trend=trend)
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
            )
            text = response.choices[0].message.content
        except openai.OpenAIError as e:
            logger.exception("Analysis request failed for %s: %s", symbol, e)
            return UNAVAILABLE_MESSAGE
        if not text:
            logger.warning("Analysis for %s came back empty", symbol)
            return UNAVAILABLE_MESSAGE
        return text.strip()
