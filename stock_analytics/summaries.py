from __future__ import annotations

from typing import Any

import numpy as np

from .config import (
    CCI_OVERBOUGHT,
    CCI_OVERSOLD,
    CROSS_FAST,
    CROSS_SLOW,
    MA_SUMMARY_PERIODS,
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    STOCH_OVERBOUGHT,
    STOCH_OVERSOLD,
    WILLIAMS_OVERBOUGHT,
    WILLIAMS_OVERSOLD,
)
from .indicators import ema, sma
from .models import BEARISH, BULLISH, DEATH_CROSS, GOLDEN_CROSS, NEUTRAL, PriceSeries, SummarySet


def _label(votes: int) -> str:
    if votes > 0:
        return BULLISH
    if votes < 0:
        return BEARISH
    return NEUTRAL


def _oscillator_vote(value: float | None, oversold: float, overbought: float) -> int:
    if value is None:
        return 0
    if value < oversold:
        return 1
    if value > overbought:
        return -1
    return 0


def ma_summary(close, price: float) -> str:
    votes = 0
    for period in MA_SUMMARY_PERIODS:
        for average in (sma(close, period), ema(close, period)):
            if average is not None:
                votes += 1 if price > average else -1
    return _label(votes)


def indicator_summary(indicators: dict[str, Any]) -> str:
    stoch = indicators.get("stochastic")
    votes = (
        _oscillator_vote(indicators.get("rsi"), RSI_OVERSOLD, RSI_OVERBOUGHT)
        + _oscillator_vote(stoch["k"] if stoch else None, STOCH_OVERSOLD, STOCH_OVERBOUGHT)
        + _oscillator_vote(indicators.get("cci"), CCI_OVERSOLD, CCI_OVERBOUGHT)
        + _oscillator_vote(indicators.get("williamsr"), WILLIAMS_OVERSOLD, WILLIAMS_OVERBOUGHT)
    )
    macd = indicators.get("macd")
    if macd is not None:
        votes += 1 if macd["macd"] > macd["signal"] else -1
    return _label(votes)


def crossover_summary(close) -> str:
    arr = np.asarray(close, dtype=float)
    if len(arr) < CROSS_SLOW + 1:
        return NEUTRAL

    fast_now, slow_now = sma(arr, CROSS_FAST), sma(arr, CROSS_SLOW)
    fast_prev, slow_prev = sma(arr[:-1], CROSS_FAST), sma(arr[:-1], CROSS_SLOW)
    if fast_prev <= slow_prev and fast_now > slow_now:
        return GOLDEN_CROSS
    if fast_prev > slow_prev and fast_now <= slow_now:
        return DEATH_CROSS
    return NEUTRAL


def build_summaries(series: PriceSeries, indicators: dict[str, Any], price: float | None) -> SummarySet:
    ma = ma_summary(series.close, price) if price is not None else NEUTRAL
    return SummarySet(
        ma=ma,
        indicators=indicator_summary(indicators),
        crossovers=crossover_summary(series.close),
    )
