from __future__ import annotations

import pandas as pd
import pytest


def build_candles(closes, spread=1.0, volume=1000.0, start="2024-01-01"):
    dates = pd.date_range(start, periods=len(closes), freq="D")
    return [
        [ts.strftime("%Y-%m-%dT%H:%M:%S"), float(c), float(c) + spread, float(c) - spread, float(c), volume]
        for ts, c in zip(dates, closes)
    ]


@pytest.fixture
def make_candles():
    return build_candles


@pytest.fixture
def strong_financials():
    return {
        "income": [
            {"netIncome": 120.0, "revenue": 1000.0, "costOfRevenue": 500.0},
            {"netIncome": 80.0, "revenue": 900.0, "costOfRevenue": 500.0},
            {"netIncome": 70.0, "revenue": 850.0, "costOfRevenue": 480.0},
        ],
        "balance": [
            {
                "totalAssets": 1000.0,
                "longTermDebt": 100.0,
                "totalCurrentAssets": 400.0,
                "totalCurrentLiabilities": 200.0,
                "commonStock": 50.0,
            },
            {
                "totalAssets": 1000.0,
                "longTermDebt": 200.0,
                "totalCurrentAssets": 300.0,
                "totalCurrentLiabilities": 200.0,
                "commonStock": 50.0,
            },
            {"totalAssets": 1000.0},
        ],
        "cashflow": [
            {"operatingCashFlow": 150.0},
            {"operatingCashFlow": 100.0},
        ],
    }
