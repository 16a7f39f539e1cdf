from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import pandas as pd

from .config import STATEMENT_PERIODS
from .models import FinancialStatementSet, RatioSnapshot, StatementPeriod, ValidationError

logger = logging.getLogger(__name__)

STATEMENT_KEYS = {
    "net_income": [
        "netIncome",
        "net_income",
        "NetIncomeLoss",
        "ProfitLoss",
        "Net Income",
    ],
    "revenue": [
        "revenue",
        "totalRevenue",
        "Revenues",
        "RevenueFromContractWithCustomerExcludingAssessedTax",
        "SalesRevenueNet",
        "Total Revenue",
    ],
    "cost_of_revenue": [
        "costOfRevenue",
        "cost_of_revenue",
        "CostOfRevenue",
        "CostOfGoodsAndServicesSold",
        "CostOfGoodsSold",
        "Cost Of Revenue",
    ],
    "total_assets": [
        "totalAssets",
        "total_assets",
        "Assets",
        "Total Assets",
    ],
    "long_term_debt": [
        "longTermDebt",
        "long_term_debt",
        "LongTermDebtNoncurrent",
        "LongTermDebt",
        "Long Term Debt",
    ],
    "total_current_assets": [
        "totalCurrentAssets",
        "total_current_assets",
        "AssetsCurrent",
        "Current Assets",
    ],
    "total_current_liabilities": [
        "totalCurrentLiabilities",
        "total_current_liabilities",
        "LiabilitiesCurrent",
        "Current Liabilities",
    ],
    "common_stock": [
        "commonStock",
        "common_stock",
        "CommonStockValue",
        "CommonStockSharesOutstanding",
        "Common Stock",
    ],
    "operating_cash_flow": [
        "operatingCashFlow",
        "operating_cash_flow",
        "NetCashProvidedByUsedInOperatingActivities",
        "Operating Cash Flow",
        "Total Cash From Operating Activities",
    ],
}

RATIO_KEYS = {
    "pe_ratio": ["peRatio", "pe_ratio", "peNormalizedAnnual", "peTTM"],
    "pb_ratio": ["pbRatio", "pb_ratio", "pbAnnual", "pbQuarterly"],
    "current_ratio": ["currentRatio", "current_ratio", "currentRatioAnnual", "currentRatioQuarterly"],
    "debt_to_equity": [
        "debtToEquity",
        "debt_to_equity",
        "debtToEquityAnnual",
        "totalDebt/totalEquityAnnual",
    ],
}


def safe_float(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(num) or num in (float("inf"), float("-inf")):
        return None
    return num


def _norm_key(text: str) -> str:
    return "".join(ch for ch in str(text).lower() if ch.isalnum())


def _line_items_to_mapping(lines: list) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for line in lines:
        if not isinstance(line, Mapping):
            raise ValidationError(f"statement line is not an object: {line!r}")
        value = line.get("value")
        for key in ("concept", "label"):
            name = line.get(key)
            if name:
                # Reported concepts may carry a taxonomy prefix such as "us-gaap_".
                out.setdefault(str(name).split("_", 1)[-1] if key == "concept" else str(name), value)
    return out


def _pick_value(report: Mapping[str, Any], keys: list[str]) -> float | None:
    for key in keys:
        if key in report:
            return safe_float(report[key])
    wanted = {_norm_key(k) for k in keys}
    for name, value in report.items():
        if _norm_key(name) in wanted:
            return safe_float(value)
    return None


def statement_period_from_payload(report: Any) -> StatementPeriod:
    if report is None:
        return StatementPeriod()
    if isinstance(report, StatementPeriod):
        return report
    if isinstance(report, list):
        report = _line_items_to_mapping(report)
    if not isinstance(report, Mapping):
        raise ValidationError(f"statement period must be an object or line list, got {type(report).__name__}")
    return StatementPeriod(**{field: _pick_value(report, keys) for field, keys in STATEMENT_KEYS.items()})


def _periods(items: Any, name: str, max_periods: int) -> list[StatementPeriod]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValidationError(f"{name} must be a list of periods, newest first")
    return [statement_period_from_payload(item) for item in items[:max_periods]]


def _filing_report(filing: Any) -> Mapping[str, Any]:
    if filing is None:
        return {}
    if not isinstance(filing, Mapping):
        raise ValidationError(f"reported filing is not an object: {filing!r}")
    report = filing.get("report") or {}
    if not isinstance(report, Mapping):
        raise ValidationError(f"filing report is not an object: {report!r}")
    return report


def statements_from_payload(payload: Any, max_periods: int = STATEMENT_PERIODS) -> FinancialStatementSet:
    """Build a FinancialStatementSet from ``{income, balance, cashflow}`` or reported filings.

    Reported filings look like ``{"data": [{"report": {"ic": ..., "bs": ...,
    "cf": ...}}, ...]}`` with the newest filing first.
    """
    if payload is None:
        return FinancialStatementSet()
    if isinstance(payload, FinancialStatementSet):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError("financials must be an object")

    if "data" in payload:
        filings = payload.get("data") or []
        if not isinstance(filings, list):
            raise ValidationError("financials.data must be a list of filings")
        reports = [_filing_report(filing) for filing in filings[:max_periods]]
        logger.debug("read %d reported filings", len(reports))
        return FinancialStatementSet(
            income=[statement_period_from_payload(r.get("ic")) for r in reports],
            balance=[statement_period_from_payload(r.get("bs")) for r in reports],
            cashflow=[statement_period_from_payload(r.get("cf")) for r in reports],
        )

    return FinancialStatementSet(
        income=_periods(payload.get("income"), "income", max_periods),
        balance=_periods(payload.get("balance"), "balance", max_periods),
        cashflow=_periods(payload.get("cashflow"), "cashflow", max_periods),
    )


def ratios_from_payload(payload: Any) -> RatioSnapshot:
    if payload is None:
        return RatioSnapshot()
    if isinstance(payload, RatioSnapshot):
        return payload
    if not isinstance(payload, Mapping):
        raise ValidationError("ratios must be an object")

    metric = payload.get("metric", payload)
    if metric is None:
        return RatioSnapshot()
    if not isinstance(metric, Mapping):
        raise ValidationError("ratios.metric must be an object")
    return RatioSnapshot(**{field: _pick_value(metric, keys) for field, keys in RATIO_KEYS.items()})


def ownership_from_payload(payload: Any) -> list[Mapping[str, Any]]:
    """Holder records from a ``[{name, share}, ...]`` list or an ``{"ownership": [...]}`` object."""
    if payload is None:
        return []
    if isinstance(payload, Mapping):
        payload = payload.get("ownership") or []
    if not isinstance(payload, list):
        raise ValidationError("ownership must be a list of holders")
    for holder in payload:
        if not isinstance(holder, Mapping):
            raise ValidationError(f"ownership holder is not an object: {holder!r}")
    return payload
