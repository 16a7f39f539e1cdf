from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd


class ValidationError(ValueError):
    """Raised when caller-supplied market or statement data is malformed."""


class Recommendation(str, Enum):
    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    NEUTRAL = "Neutral"
    SELL = "Sell"
    STRONG_SELL = "Strong Sell"


BULLISH = "Bullish"
BEARISH = "Bearish"
NEUTRAL = "Neutral"
GOLDEN_CROSS = "Bullish (Golden Cross)"
DEATH_CROSS = "Bearish (Death Cross)"


@dataclass(frozen=True)
class Bar:
    date: pd.Timestamp
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class PriceSeries:
    dates: list[pd.Timestamp]
    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray
    volume: np.ndarray

    def __len__(self) -> int:
        return len(self.close)

    def bar(self, index: int) -> Bar:
        return Bar(
            date=self.dates[index],
            open=float(self.open[index]),
            high=float(self.high[index]),
            low=float(self.low[index]),
            close=float(self.close[index]),
            volume=float(self.volume[index]),
        )


@dataclass
class StatementPeriod:
    net_income: float | None = None
    revenue: float | None = None
    cost_of_revenue: float | None = None
    total_assets: float | None = None
    long_term_debt: float | None = None
    total_current_assets: float | None = None
    total_current_liabilities: float | None = None
    common_stock: float | None = None
    operating_cash_flow: float | None = None


@dataclass
class FinancialStatementSet:
    income: list[StatementPeriod] = field(default_factory=list)
    balance: list[StatementPeriod] = field(default_factory=list)
    cashflow: list[StatementPeriod] = field(default_factory=list)


@dataclass
class RatioSnapshot:
    pe_ratio: float | None = None
    pb_ratio: float | None = None
    current_ratio: float | None = None
    debt_to_equity: float | None = None


@dataclass
class PivotLevel:
    r3: float
    r2: float
    r1: float
    pp: float
    s1: float
    s2: float
    s3: float


@dataclass
class PivotLevels:
    classic: PivotLevel
    fibonacci: PivotLevel
    camarilla: PivotLevel


@dataclass
class PiotroskiResult:
    score: int | None
    checklist: dict[str, bool] = field(default_factory=dict)


@dataclass
class GrahamResult:
    passed: bool | None
    details: dict[str, float | None] = field(default_factory=dict)


@dataclass
class SummarySet:
    ma: str
    indicators: str
    crossovers: str


@dataclass
class AnalysisResult:
    indicators: dict[str, Any]
    pivots: PivotLevels | None
    recommendation: Recommendation
    summaries: SummarySet
    piotroski: PiotroskiResult
    graham: GrahamResult
    fii_percentage: float | None = None

    @property
    def piotroski_f_score(self) -> int | None:
        return self.piotroski.score

    @property
    def graham_scan_passed(self) -> bool | None:
        return self.graham.passed

    def to_payload(self) -> dict[str, Any]:
        indicators = dict(self.indicators)
        indicators["bollingerBands"] = indicators.pop("bollinger_bands", None)
        adx = indicators.get("adx")
        if adx is not None:
            indicators["adx"] = {"adx": adx["adx"], "plusDI": adx["plus_di"], "minusDI": adx["minus_di"]}
        return {
            "indicators": indicators,
            "pivots": asdict(self.pivots) if self.pivots is not None else None,
            "recommendation": self.recommendation.value,
            "summaries": asdict(self.summaries),
            "piotroskiFScore": self.piotroski.score,
            "grahamScanPassed": self.graham.passed,
            "fiiPercentage": self.fii_percentage,
        }
