from __future__ import annotations

from .config import RSI_MIDLINE, RSI_OVERBOUGHT, RSI_OVERSOLD, SCORE_MILD, SCORE_STRONG
from .models import Recommendation


def _rsi_points(rsi: float) -> int:
    if rsi < RSI_OVERSOLD:
        return 2
    if rsi < RSI_MIDLINE:
        return 1
    if rsi > RSI_OVERBOUGHT:
        return -2
    if rsi > RSI_MIDLINE:
        return -1
    return 0


def recommendation_score(
    price: float | None,
    rsi: float | None,
    ema20: float | None,
    ema50: float | None,
) -> int:
    score = 0
    if rsi is not None:
        score += _rsi_points(rsi)
    if price is not None and ema50 is not None:
        score += 2 if price > ema50 else -2
    if price is not None and ema20 is not None:
        score += 1 if price > ema20 else -1
    return score


def label_for_score(score: int) -> Recommendation:
    if score >= SCORE_STRONG:
        return Recommendation.STRONG_BUY
    if score >= SCORE_MILD:
        return Recommendation.BUY
    if score <= -SCORE_STRONG:
        return Recommendation.STRONG_SELL
    if score <= -SCORE_MILD:
        return Recommendation.SELL
    return Recommendation.NEUTRAL


def recommend(
    price: float | None,
    rsi: float | None,
    ema20: float | None,
    ema50: float | None,
) -> Recommendation:
    return label_for_score(recommendation_score(price, rsi, ema20, ema50))
