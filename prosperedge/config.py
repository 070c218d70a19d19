"""
Runtime configuration from environment variables.

MOCK mode uses synthetic market data; REAL mode is enabled by setting
PROSPEREDGE_FINNHUB_API_KEY. Commentary is chosen separately: an OpenAI analyst
when PROSPEREDGE_OPENAI_API_KEY is set, else the offline template.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from enum import Enum

from prosperedge.analysis import Analyst, OpenAIAnalyst, TemplateAnalyst
from prosperedge.market import FinnhubMarketData, MarketDataProvider, SyntheticMarketData

logger = logging.getLogger(__name__)

FINNHUB_KEY_ENV = "PROSPEREDGE_FINNHUB_API_KEY"
MOCK_SEED_ENV = "PROSPEREDGE_MOCK_SEED"
OPENAI_KEY_ENV = "PROSPEREDGE_OPENAI_API_KEY"
OPENAI_MODEL_ENV = "PROSPEREDGE_OPENAI_MODEL"


class AppMode(Enum):
    MOCK = "MOCK"
    REAL = "REAL"


def resolve_mode(env: Mapping[str, str] | None = None) -> AppMode:
    """REAL when a Finnhub key is configured, else MOCK."""
    env = os.environ if env is None else env
    return AppMode.REAL if env.get(FINNHUB_KEY_ENV, "").strip() else AppMode.MOCK


def market_data_from_env(env: Mapping[str, str] | None = None) -> MarketDataProvider:
    """Provider matching the configured mode."""
    env = os.environ if env is None else env
    seed = int(env.get(MOCK_SEED_ENV, "0") or 0)
    synthetic = SyntheticMarketData(seed=seed)
    if resolve_mode(env) == AppMode.REAL:
        logger.info("Market data: REAL mode (Finnhub)")
        return FinnhubMarketData(env[FINNHUB_KEY_ENV].strip(), fallback=synthetic)
    logger.info("Market data: MOCK mode (synthetic, seed=%s). Set %s for live data.", seed, FINNHUB_KEY_ENV)
    return synthetic


def analyst_from_env(env: Mapping[str, str] | None = None) -> Analyst:
    """OpenAI analyst when a key is configured, else the offline template."""
    env = os.environ if env is None else env
    api_key = env.get(OPENAI_KEY_ENV, "").strip()
    if not api_key:
        logger.info("Analysis: template mode. Set %s for live commentary.", OPENAI_KEY_ENV)
        return TemplateAnalyst()
    model = env.get(OPENAI_MODEL_ENV, "").strip()
    logger.info("Analysis: OpenAI (%s)", model or "default model")
    if model:
        return OpenAIAnalyst(api_key, model=model)
    return OpenAIAnalyst(api_key)
