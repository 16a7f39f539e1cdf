from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pandas as pd

from .config import (
    ADX_PERIOD,
    ATR_PERIOD,
    BOLLINGER_PERIOD,
    BOLLINGER_STD,
    CCI_CONSTANT,
    CCI_PERIOD,
    EMA_LONG,
    EMA_SHORT,
    MACD_FAST,
    MACD_SIGNAL,
    MACD_SLOW,
    MFI_PERIOD,
    ROC_PERIOD,
    RSI_PERIOD,
    STOCH_PERIOD,
    STOCH_SIGNAL,
    WILLIAMS_PERIOD,
)
from .models import PriceSeries

logger = logging.getLogger(__name__)


def _as_array(values) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _wilder_average(values: np.ndarray, period: int) -> float:
    avg = float(np.mean(values[:period]))
    for value in values[period:]:
        avg = (avg * (period - 1) + float(value)) / period
    return avg


def _wilder_sums(values: np.ndarray, period: int) -> np.ndarray:
    out = np.empty(len(values) - period + 1, dtype=float)
    out[0] = float(np.sum(values[:period]))
    for i in range(1, len(out)):
        out[i] = out[i - 1] - out[i - 1] / period + values[period - 1 + i]
    return out


def _true_range(high: np.ndarray, low: np.ndarray, close: np.ndarray) -> np.ndarray:
    prev_close = close[:-1]
    h = high[1:]
    lo = low[1:]
    return np.maximum.reduce([h - lo, np.abs(h - prev_close), np.abs(lo - prev_close)])


def sma(values, period: int) -> float | None:
    arr = _as_array(values)
    if period <= 0 or len(arr) < period:
        return None
    return float(np.mean(arr[-period:]))


def ema_series(values, period: int) -> np.ndarray:
    """EMA at every bar, NaN until the SMA seed is available at index ``period - 1``."""
    arr = _as_array(values)
    out = np.full(len(arr), np.nan)
    if period <= 0 or len(arr) < period:
        return out

    k = 2.0 / (period + 1)
    current = float(np.mean(arr[:period]))
    out[period - 1] = current
    for i in range(period, len(arr)):
        current = arr[i] * k + current * (1 - k)
        out[i] = current
    return out


def ema(values, period: int) -> float | None:
    series = ema_series(values, period)
    if len(series) == 0 or np.isnan(series[-1]):
        return None
    return float(series[-1])


def rsi(values, period: int = RSI_PERIOD) -> float | None:
    arr = _as_array(values)
    if period <= 0 or len(arr) <= period:
        return None

    diffs = np.diff(arr)
    avg_gain = _wilder_average(np.clip(diffs, 0.0, None), period)
    avg_loss = _wilder_average(np.clip(-diffs, 0.0, None), period)
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def macd(
    values,
    fast: int = MACD_FAST,
    slow: int = MACD_SLOW,
    signal: int = MACD_SIGNAL,
) -> dict[str, float] | None:
    arr = _as_array(values)
    if len(arr) < slow + signal - 1:
        return None

    line = (ema_series(arr, fast) - ema_series(arr, slow))[slow - 1 :]
    signal_line = ema_series(line, signal)
    macd_value = float(line[-1])
    signal_value = float(signal_line[-1])
    return {
        "macd": macd_value,
        "signal": signal_value,
        "histogram": macd_value - signal_value,
    }


def _percent_k_series(high: np.ndarray, low: np.ndarray, close: np.ndarray, period: int) -> np.ndarray:
    highest = pd.Series(high).rolling(window=period, min_periods=period).max().to_numpy()
    lowest = pd.Series(low).rolling(window=period, min_periods=period).min().to_numpy()
    span = highest - lowest
    with np.errstate(divide="ignore", invalid="ignore"):
        k = np.where(span > 0, 100.0 * (close - lowest) / span, 50.0)
    k[: period - 1] = np.nan
    return k


def stochastic(
    high,
    low,
    close,
    period: int = STOCH_PERIOD,
    signal_period: int = STOCH_SIGNAL,
) -> dict[str, float] | None:
    h, lo, c = _as_array(high), _as_array(low), _as_array(close)
    if len(c) < period + signal_period - 1:
        return None

    k = _percent_k_series(h, lo, c, period)
    return {"k": float(k[-1]), "d": float(np.mean(k[-signal_period:]))}


def cci(high, low, close, period: int = CCI_PERIOD) -> float | None:
    h, lo, c = _as_array(high), _as_array(low), _as_array(close)
    if len(c) < period:
        return None

    window = ((h + lo + c) / 3.0)[-period:]
    mean = float(np.mean(window))
    mean_deviation = float(np.mean(np.abs(window - mean)))
    if mean_deviation == 0:
        return 0.0
    return (float(window[-1]) - mean) / (CCI_CONSTANT * mean_deviation)


def williams_r(high, low, close, period: int = WILLIAMS_PERIOD) -> float | None:
    h, lo, c = _as_array(high), _as_array(low), _as_array(close)
    if len(c) < period:
        return None

    highest = float(np.max(h[-period:]))
    lowest = float(np.min(lo[-period:]))
    if highest == lowest:
        return -50.0
    return -100.0 * (highest - float(c[-1])) / (highest - lowest)


def mfi(high, low, close, volume, period: int = MFI_PERIOD) -> float | None:
    h, lo, c, v = _as_array(high), _as_array(low), _as_array(close), _as_array(volume)
    if len(c) <= period:
        return None

    typical = ((h + lo + c) / 3.0)[-(period + 1) :]
    money_flow = (typical * v[-(period + 1) :])[1:]
    change = np.diff(typical)
    positive = float(np.sum(money_flow[change > 0]))
    negative = float(np.sum(money_flow[change < 0]))
    if negative == 0:
        return 100.0
    ratio = positive / negative
    return 100.0 - 100.0 / (1.0 + ratio)


def atr(high, low, close, period: int = ATR_PERIOD) -> float | None:
    h, lo, c = _as_array(high), _as_array(low), _as_array(close)
    if len(c) <= period:
        return None
    return _wilder_average(_true_range(h, lo, c), period)


def adx(high, low, close, period: int = ADX_PERIOD) -> dict[str, float] | None:
    h, lo, c = _as_array(high), _as_array(low), _as_array(close)
    if len(c) < 2 * period:
        return None

    up_move = h[1:] - h[:-1]
    down_move = lo[:-1] - lo[1:]
    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)

    smooth_tr = _wilder_sums(_true_range(h, lo, c), period)
    smooth_plus = _wilder_sums(plus_dm, period)
    smooth_minus = _wilder_sums(minus_dm, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = np.where(smooth_tr > 0, 100.0 * smooth_plus / smooth_tr, 0.0)
        minus_di = np.where(smooth_tr > 0, 100.0 * smooth_minus / smooth_tr, 0.0)
        di_sum = plus_di + minus_di
        dx = np.where(di_sum > 0, 100.0 * np.abs(plus_di - minus_di) / di_sum, 0.0)

    return {
        "adx": _wilder_average(dx, period),
        "plus_di": float(plus_di[-1]),
        "minus_di": float(minus_di[-1]),
    }


def bollinger_bands(values, period: int = BOLLINGER_PERIOD, std_dev: float = BOLLINGER_STD) -> dict[str, float] | None:
    arr = _as_array(values)
    if period <= 0 or len(arr) < period:
        return None

    window = arr[-period:]
    middle = float(np.mean(window))
    width = std_dev * float(np.std(window))
    return {"upper": middle + width, "middle": middle, "lower": middle - width}


def roc(values, period: int = ROC_PERIOD) -> float | None:
    arr = _as_array(values)
    if period <= 0 or len(arr) <= period:
        return None

    base = float(arr[-period - 1])
    if base == 0:
        return None
    return (float(arr[-1]) - base) / base * 100.0


def compute_indicators(series: PriceSeries) -> dict[str, Any]:
    high, low, close = series.high, series.low, series.close
    out = {
        "ema20": ema(close, EMA_SHORT),
        "ema50": ema(close, EMA_LONG),
        "rsi": rsi(close),
        "macd": macd(close),
        "stochastic": stochastic(high, low, close),
        "cci": cci(high, low, close),
        "williamsr": williams_r(high, low, close),
        "mfi": mfi(high, low, close, series.volume),
        "atr": atr(high, low, close),
        "adx": adx(high, low, close),
        "bollinger_bands": bollinger_bands(close),
        "roc": roc(close),
    }
    missing = [name for name, value in out.items() if value is None]
    if missing:
        logger.debug("insufficient history (%d bars) for: %s", len(series), ", ".join(missing))
    return out
