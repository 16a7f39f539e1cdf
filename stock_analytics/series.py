from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from numbers import Real
from typing import Any

import numpy as np
import pandas as pd

from .models import PriceSeries, ValidationError

logger = logging.getLogger(__name__)

CANDLE_FIELDS = ("date", "open", "high", "low", "close", "volume")


def _numeric(value: Any, row: int, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
        raise ValidationError(f"candle {row}: {name} is not numeric ({value!r})")
    num = float(value)
    if not math.isfinite(num):
        raise ValidationError(f"candle {row}: {name} is not finite ({value!r})")
    return num


def _timestamp(value: Any, row: int) -> pd.Timestamp:
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"candle {row}: unparseable date {value!r}") from exc
    if pd.isna(ts):
        raise ValidationError(f"candle {row}: missing date")
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def normalize_candles(candles: Sequence[Sequence[Any]]) -> PriceSeries:
    """Validate raw ``[date, open, high, low, close, volume]`` rows into a PriceSeries.

    Rows must already be ordered oldest first. Short input is accepted; the
    indicator functions decide what they can compute from it.
    """
    if candles is None:
        candles = []
    if isinstance(candles, (str, bytes)) or not isinstance(candles, Sequence):
        raise ValidationError(f"candles must be a list of rows, got {type(candles).__name__}")

    dates: list[pd.Timestamp] = []
    columns: dict[str, list[float]] = {name: [] for name in CANDLE_FIELDS[1:]}

    for row, candle in enumerate(candles):
        if isinstance(candle, (str, bytes)) or not isinstance(candle, Sequence) or len(candle) != 6:
            raise ValidationError(f"candle {row}: expected 6 fields, got {candle!r}")

        ts = _timestamp(candle[0], row)
        values = {name: _numeric(candle[i], row, name) for i, name in enumerate(CANDLE_FIELDS[1:], start=1)}

        if values["high"] < values["low"]:
            raise ValidationError(f"candle {row}: high {values['high']} is below low {values['low']}")
        if values["low"] < 0:
            raise ValidationError(f"candle {row}: negative low {values['low']}")
        if values["volume"] < 0:
            raise ValidationError(f"candle {row}: negative volume {values['volume']}")
        if dates and ts <= dates[-1]:
            raise ValidationError(f"candle {row}: date {ts.isoformat()} does not follow {dates[-1].isoformat()}")

        dates.append(ts)
        for name, num in values.items():
            columns[name].append(num)

    logger.debug("normalized %d candles", len(dates))
    return PriceSeries(
        dates=dates,
        open=np.array(columns["open"], dtype=float),
        high=np.array(columns["high"], dtype=float),
        low=np.array(columns["low"], dtype=float),
        close=np.array(columns["close"], dtype=float),
        volume=np.array(columns["volume"], dtype=float),
    )


def history_records(series: PriceSeries) -> list[dict[str, Any]]:
    return [
        {
            "time": ts.strftime("%Y-%m-%d"),
            "open": float(o),
            "high": float(h),
            "low": float(lo),
            "close": float(c),
        }
        for ts, o, h, lo, c in zip(series.dates, series.open, series.high, series.low, series.close)
    ]
