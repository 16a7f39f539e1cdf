from __future__ import annotations

import pandas as pd
import pytest

from stock_analytics.models import ValidationError
from stock_analytics.series import history_records, normalize_candles


def test_normalize_candles_splits_fields_oldest_first(make_candles) -> None:
    series = normalize_candles(make_candles([10.0, 11.0, 12.0]))

    assert len(series) == 3
    assert series.close.tolist() == [10.0, 11.0, 12.0]
    assert series.high.tolist() == [11.0, 12.0, 13.0]
    assert series.low.tolist() == [9.0, 10.0, 11.0]
    assert series.volume.tolist() == [1000.0] * 3
    assert series.dates[0] == pd.Timestamp("2024-01-01")


def test_normalize_candles_accepts_short_and_empty_input(make_candles) -> None:
    assert len(normalize_candles([])) == 0
    assert len(normalize_candles(make_candles([5.0]))) == 1


def test_high_below_low_is_rejected() -> None:
    candles = [["2024-01-01", 10.0, 9.0, 11.0, 10.0, 100]]
    with pytest.raises(ValidationError, match="below low"):
        normalize_candles(candles)


@pytest.mark.parametrize("bad", ["10.5", None, True, float("nan"), float("inf")])
def test_non_numeric_field_is_rejected(bad) -> None:
    candles = [["2024-01-01", 10.0, 11.0, 9.0, bad, 100]]
    with pytest.raises(ValidationError):
        normalize_candles(candles)


def test_dates_must_strictly_increase() -> None:
    candles = [
        ["2024-01-02", 10.0, 11.0, 9.0, 10.0, 100],
        ["2024-01-01", 10.0, 11.0, 9.0, 10.0, 100],
    ]
    with pytest.raises(ValidationError, match="does not follow"):
        normalize_candles(candles)

    duplicate = [candles[0], candles[0]]
    with pytest.raises(ValidationError):
        normalize_candles(duplicate)


def test_malformed_rows_are_rejected() -> None:
    with pytest.raises(ValidationError, match="6 fields"):
        normalize_candles([["2024-01-01", 10.0, 11.0, 9.0, 10.0]])
    with pytest.raises(ValidationError, match="unparseable date"):
        normalize_candles([["not a date", 10.0, 11.0, 9.0, 10.0, 100]])
    with pytest.raises(ValidationError, match="negative volume"):
        normalize_candles([["2024-01-01", 10.0, 11.0, 9.0, 10.0, -1]])


def test_timezone_aware_dates_are_normalized_to_utc() -> None:
    series = normalize_candles([["2024-01-01T09:15:00+05:30", 10.0, 11.0, 9.0, 10.0, 100]])
    assert series.dates[0] == pd.Timestamp("2024-01-01 03:45:00")


def test_history_records_are_chart_ready(make_candles) -> None:
    records = history_records(normalize_candles(make_candles([10.0, 12.0])))

    assert records == [
        {"time": "2024-01-01", "open": 10.0, "high": 11.0, "low": 9.0, "close": 10.0},
        {"time": "2024-01-02", "open": 12.0, "high": 13.0, "low": 11.0, "close": 12.0},
    ]


@pytest.mark.parametrize("candles", [5, "abc", b"abc", {"close": 10.0}])
def test_non_list_candles_are_rejected(candles) -> None:
    with pytest.raises(ValidationError, match="candles must be a list"):
        normalize_candles(candles)
