from __future__ import annotations

from .config import CAMARILLA_DIVISORS, CAMARILLA_FACTOR, FIBONACCI_LEVELS
from .models import Bar, PivotLevel, PivotLevels, PriceSeries


def classic_pivots(high: float, low: float, close: float) -> PivotLevel:
    pp = (high + low + close) / 3.0
    span = high - low
    return PivotLevel(
        r3=pp + 2.0 * span,
        r2=pp + span,
        r1=2.0 * pp - low,
        pp=pp,
        s1=2.0 * pp - high,
        s2=pp - span,
        s3=pp - 2.0 * span,
    )


def fibonacci_pivots(high: float, low: float, close: float) -> PivotLevel:
    pp = (high + low + close) / 3.0
    span = high - low
    f1, f2, f3 = FIBONACCI_LEVELS
    return PivotLevel(
        r3=pp + f3 * span,
        r2=pp + f2 * span,
        r1=pp + f1 * span,
        pp=pp,
        s1=pp - f1 * span,
        s2=pp - f2 * span,
        s3=pp - f3 * span,
    )


def camarilla_pivots(high: float, low: float, close: float) -> PivotLevel:
    # Levels are centred on the close; pp is reported for reference only.
    pp = (high + low + close) / 3.0
    span = high - low
    d1, d2, d3 = CAMARILLA_DIVISORS
    return PivotLevel(
        r3=close + span * CAMARILLA_FACTOR / d3,
        r2=close + span * CAMARILLA_FACTOR / d2,
        r1=close + span * CAMARILLA_FACTOR / d1,
        pp=pp,
        s1=close - span * CAMARILLA_FACTOR / d1,
        s2=close - span * CAMARILLA_FACTOR / d2,
        s3=close - span * CAMARILLA_FACTOR / d3,
    )


def pivots_from_bar(bar: Bar) -> PivotLevels:
    return PivotLevels(
        classic=classic_pivots(bar.high, bar.low, bar.close),
        fibonacci=fibonacci_pivots(bar.high, bar.low, bar.close),
        camarilla=camarilla_pivots(bar.high, bar.low, bar.close),
    )


def compute_pivots(series: PriceSeries) -> PivotLevels | None:
    """Pivot levels from the last completed bar; the final bar may still be forming."""
    if len(series) < 2:
        return None
    return pivots_from_bar(series.bar(-2))
