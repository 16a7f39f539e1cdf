from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pandas as pd

from .config import BATCH_MAX_WORKERS
from .fundamentals import foreign_ownership_pct, graham_scan, piotroski_f_score
from .indicators import compute_indicators
from .models import AnalysisResult, Recommendation, ValidationError
from .payloads import ratios_from_payload, safe_float, statements_from_payload
from .pivots import compute_pivots
from .recommendation import recommend
from .series import normalize_candles
from .summaries import build_summaries

logger = logging.getLogger(__name__)

RECOMMENDATION_RANK = {
    Recommendation.STRONG_BUY: 4,
    Recommendation.BUY: 3,
    Recommendation.NEUTRAL: 2,
    Recommendation.SELL: 1,
    Recommendation.STRONG_SELL: 0,
}


def analyze(
    candles,
    financials=None,
    ratios=None,
    current_price: float | None = None,
    ownership=None,
) -> AnalysisResult:
    """Run the full technical and fundamental analysis for one instrument.

    ``candles`` are raw ``[date, open, high, low, close, volume]`` rows, oldest
    first. ``financials`` and ``ratios`` accept either model objects or the
    upstream JSON shapes understood by :mod:`payloads`. Without an explicit
    ``current_price`` the last close stands in for it.
    """
    series = normalize_candles(candles)
    statements = statements_from_payload(financials)
    ratio_snapshot = ratios_from_payload(ratios)

    price = current_price
    if price is None and len(series):
        price = float(series.close[-1])

    indicators = compute_indicators(series)
    pivots = compute_pivots(series)
    recommendation = recommend(price, indicators["rsi"], indicators["ema20"], indicators["ema50"])
    summaries = build_summaries(series, indicators, price)

    return AnalysisResult(
        indicators=indicators,
        pivots=pivots,
        recommendation=recommendation,
        summaries=summaries,
        piotroski=piotroski_f_score(statements),
        graham=graham_scan(ratio_snapshot),
        fii_percentage=foreign_ownership_pct(ownership),
    )


def analyze_payload(payload: dict[str, Any]) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("snapshot must be an object")

    price = payload.get("currentPrice")
    current_price = safe_float(price)
    if price is not None and current_price is None:
        raise ValidationError(f"currentPrice is not numeric ({price!r})")

    result = analyze(
        payload.get("candles"),
        financials=payload.get("financials"),
        ratios=payload.get("ratios"),
        current_price=current_price,
        ownership=payload.get("ownership"),
    )
    return result.to_payload()


def _batch_row(symbol: str, snapshot: dict[str, Any]) -> dict[str, Any]:
    try:
        out = analyze_payload(snapshot)
    except ValidationError as exc:
        logger.warning("%s: rejected snapshot: %s", symbol, exc)
        return {
            "symbol": symbol,
            "recommendation": None,
            "piotroski_f_score": None,
            "graham_scan_passed": None,
            "ma_summary": None,
            "indicator_summary": None,
            "crossover_summary": None,
            "rsi": None,
            "error": str(exc),
            "_rec_sort": -1,
        }

    return {
        "symbol": symbol,
        "recommendation": out["recommendation"],
        "piotroski_f_score": out["piotroskiFScore"],
        "graham_scan_passed": out["grahamScanPassed"],
        "ma_summary": out["summaries"]["ma"],
        "indicator_summary": out["summaries"]["indicators"],
        "crossover_summary": out["summaries"]["crossovers"],
        "rsi": out["indicators"]["rsi"],
        "error": None,
        "_rec_sort": RECOMMENDATION_RANK[Recommendation(out["recommendation"])],
    }


def analyze_batch(snapshots: dict[str, dict[str, Any]], max_workers: int = BATCH_MAX_WORKERS) -> pd.DataFrame:
    symbols = list(snapshots)
    logger.info("analyzing %d snapshots with %d workers", len(symbols), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        rows = list(pool.map(lambda s: _batch_row(s, snapshots[s]), symbols))

    df = pd.DataFrame(rows)
    if df.empty:
        return df

    df["_score_sort"] = pd.to_numeric(df["piotroski_f_score"], errors="coerce").fillna(-1)
    df = df.sort_values(
        by=["_score_sort", "_rec_sort", "symbol"],
        ascending=[False, False, True],
    ).drop(columns=["_score_sort", "_rec_sort"])
    return df.reset_index(drop=True)
