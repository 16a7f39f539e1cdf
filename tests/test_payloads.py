from __future__ import annotations

import pytest

from stock_analytics.models import RatioSnapshot, StatementPeriod, ValidationError
from stock_analytics.payloads import (
    ownership_from_payload,
    ratios_from_payload,
    safe_float,
    statement_period_from_payload,
    statements_from_payload,
)


def test_flat_period_reads_camel_and_snake_keys() -> None:
    period = statement_period_from_payload({"netIncome": 12, "total_assets": "300.5", "revenue": "n/a"})

    assert period.net_income == 12.0
    assert period.total_assets == 300.5
    assert period.revenue is None
    assert period.operating_cash_flow is None


def test_reported_line_items_are_matched_by_concept_or_label() -> None:
    period = statement_period_from_payload(
        [
            {"concept": "us-gaap_NetIncomeLoss", "label": "Net income", "value": 55.0},
            {"concept": "ifrs_Revenue", "label": "Revenue from operations", "value": 900.0},
            {"concept": "custom_Xyz", "label": "Operating Cash Flow", "value": 70.0},
        ]
    )

    assert period.net_income == 55.0
    assert period.revenue == 900.0
    assert period.operating_cash_flow == 70.0


def test_statements_from_reported_filings_keep_newest_periods() -> None:
    filings = {
        "data": [
            {"report": {"ic": {"netIncome": 3}, "bs": {"totalAssets": 30}, "cf": {"operatingCashFlow": 300}}},
            {"report": {"ic": {"netIncome": 2}, "bs": {"totalAssets": 20}, "cf": {"operatingCashFlow": 200}}},
            {"report": {"ic": {"netIncome": 1}, "bs": {"totalAssets": 10}, "cf": {"operatingCashFlow": 100}}},
            {"report": {"ic": {"netIncome": 0}, "bs": {"totalAssets": 0}, "cf": {"operatingCashFlow": 0}}},
        ]
    }

    statements = statements_from_payload(filings)

    assert [p.net_income for p in statements.income] == [3.0, 2.0, 1.0]
    assert [p.total_assets for p in statements.balance] == [30.0, 20.0, 10.0]
    assert [p.operating_cash_flow for p in statements.cashflow] == [300.0, 200.0, 100.0]


def test_statements_pass_through_model_objects() -> None:
    statements = statements_from_payload({"income": [StatementPeriod(net_income=1.0)], "balance": None})
    assert statements.income == [StatementPeriod(net_income=1.0)]
    assert statements.balance == []
    assert statements.cashflow == []


def test_malformed_statements_are_rejected() -> None:
    with pytest.raises(ValidationError):
        statements_from_payload({"income": {"netIncome": 1}})
    with pytest.raises(ValidationError):
        statements_from_payload([1, 2, 3])
    with pytest.raises(ValidationError):
        statement_period_from_payload("netIncome=1")


def test_ratios_from_flat_and_metric_payloads() -> None:
    flat = ratios_from_payload({"peRatio": 10, "pbRatio": 1.2, "currentRatio": 2.1, "debtToEquity": None})
    assert flat == RatioSnapshot(pe_ratio=10.0, pb_ratio=1.2, current_ratio=2.1, debt_to_equity=None)

    metric = ratios_from_payload(
        {
            "metric": {
                "peNormalizedAnnual": 12.5,
                "pbAnnual": 1.1,
                "currentRatioAnnual": 2.4,
                "debtToEquityAnnual": 0.2,
            }
        }
    )
    assert metric == RatioSnapshot(pe_ratio=12.5, pb_ratio=1.1, current_ratio=2.4, debt_to_equity=0.2)
    assert ratios_from_payload(None) == RatioSnapshot()


@pytest.mark.parametrize("payload", [{"data": ["x"]}, {"data": [{"report": "x"}]}, {"data": [{"report": [1]}]}])
def test_malformed_filings_are_rejected(payload) -> None:
    with pytest.raises(ValidationError):
        statements_from_payload(payload)


def test_missing_filing_reads_as_empty_periods() -> None:
    statements = statements_from_payload({"data": [None, {"report": None}]})

    assert statements.income == [StatementPeriod(), StatementPeriod()]
    assert statements.cashflow == [StatementPeriod(), StatementPeriod()]


def test_null_metric_object_reads_as_empty_ratios() -> None:
    assert ratios_from_payload({"metric": None}) == RatioSnapshot()


def test_ownership_from_payload() -> None:
    holders = [{"name": "Foreign Investors", "share": 4.0}]

    assert ownership_from_payload(holders) == holders
    assert ownership_from_payload({"ownership": holders}) == holders
    assert ownership_from_payload({}) == []
    assert ownership_from_payload(None) == []
    with pytest.raises(ValidationError):
        ownership_from_payload([holders[0], "Foreign Investors"])
    with pytest.raises(ValidationError):
        ownership_from_payload({"ownership": "Foreign Investors"})


@pytest.mark.parametrize(
    ("value", "expected"),
    [(3, 3.0), ("2.5", 2.5), ("n/a", None), (None, None), (True, None), (float("nan"), None), ("inf", None), ([1], None)],
)
def test_safe_float(value, expected) -> None:
    assert safe_float(value) == expected
