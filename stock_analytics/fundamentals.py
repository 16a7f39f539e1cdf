from __future__ import annotations

import logging
from typing import Any

from .config import (
    GRAHAM_CURRENT_RATIO_MIN,
    GRAHAM_DEBT_TO_EQUITY_MAX,
    GRAHAM_NUMBER_MAX,
    GRAHAM_PB_MAX,
    GRAHAM_PE_MAX,
)
from .models import FinancialStatementSet, GrahamResult, PiotroskiResult, RatioSnapshot
from .payloads import ownership_from_payload, safe_float

logger = logging.getLogger(__name__)

PIOTROSKI_CHECKS = (
    "net_income_positive",
    "operating_cash_flow_positive",
    "roa_increasing",
    "cash_flow_exceeds_net_income",
    "leverage_decreasing",
    "current_ratio_increasing",
    "shares_not_diluted",
    "gross_margin_increasing",
    "asset_turnover_increasing",
)


class _MissingInput(Exception):
    pass


def _require(value: float | None) -> float:
    if value is None:
        raise _MissingInput
    return value


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        raise _MissingInput
    return numerator / denominator


def _piotroski_checklist(statements: FinancialStatementSet) -> dict[str, bool]:
    income, balance, cashflow = statements.income, statements.balance, statements.cashflow

    net_income = [_require(income[0].net_income), _require(income[1].net_income)]
    revenue = [_require(income[0].revenue), _require(income[1].revenue)]
    cost_of_revenue = [_require(income[0].cost_of_revenue), _require(income[1].cost_of_revenue)]
    total_assets = [_require(balance[0].total_assets), _require(balance[1].total_assets)]
    long_term_debt = [_require(balance[0].long_term_debt), _require(balance[1].long_term_debt)]
    current_assets = [_require(balance[0].total_current_assets), _require(balance[1].total_current_assets)]
    current_liabilities = [
        _require(balance[0].total_current_liabilities),
        _require(balance[1].total_current_liabilities),
    ]
    shares_now = _require(balance[0].common_stock)
    shares_before = balance[1].common_stock if balance[1].common_stock is not None else shares_now
    ocf = _require(cashflow[0].operating_cash_flow)

    # Two-period inputs average the previous year against itself.
    oldest_assets = total_assets[1]
    if len(balance) > 2 and balance[2].total_assets is not None:
        oldest_assets = balance[2].total_assets
    avg_assets = [
        (total_assets[0] + total_assets[1]) / 2.0,
        (total_assets[1] + oldest_assets) / 2.0,
    ]

    return {
        "net_income_positive": net_income[0] > 0,
        "operating_cash_flow_positive": ocf > 0,
        "roa_increasing": _ratio(net_income[0], avg_assets[0]) > _ratio(net_income[1], avg_assets[1]),
        "cash_flow_exceeds_net_income": ocf > net_income[0],
        "leverage_decreasing": _ratio(long_term_debt[0], total_assets[0]) < _ratio(long_term_debt[1], total_assets[1]),
        "current_ratio_increasing": _ratio(current_assets[0], current_liabilities[0])
        > _ratio(current_assets[1], current_liabilities[1]),
        "shares_not_diluted": shares_now <= shares_before,
        "gross_margin_increasing": _ratio(revenue[0] - cost_of_revenue[0], revenue[0])
        > _ratio(revenue[1] - cost_of_revenue[1], revenue[1]),
        "asset_turnover_increasing": _ratio(revenue[0], avg_assets[0]) > _ratio(revenue[1], avg_assets[1]),
    }


def piotroski_f_score(statements: FinancialStatementSet | None) -> PiotroskiResult:
    """Nine-point Piotroski F-Score over statements ordered newest period first.

    The score is all-or-nothing: fewer than two periods in any statement, a
    missing figure in the compared periods or a zero denominator yields
    ``score=None`` rather than a partial count.
    """
    if statements is None:
        return PiotroskiResult(score=None)
    if min(len(statements.income), len(statements.balance), len(statements.cashflow)) < 2:
        logger.debug("piotroski skipped: fewer than two statement periods")
        return PiotroskiResult(score=None)

    try:
        checklist = _piotroski_checklist(statements)
    except _MissingInput:
        logger.debug("piotroski skipped: required figure missing or zero denominator")
        return PiotroskiResult(score=None)
    return PiotroskiResult(score=sum(checklist.values()), checklist=checklist)


def graham_scan(ratios: RatioSnapshot | None) -> GrahamResult:
    if ratios is None:
        return GrahamResult(passed=None)

    details = {
        "pe_ratio": ratios.pe_ratio,
        "pb_ratio": ratios.pb_ratio,
        "current_ratio": ratios.current_ratio,
        "debt_to_equity": ratios.debt_to_equity,
    }
    if any(v is None for v in details.values()):
        return GrahamResult(passed=None, details=details)

    pe, pb = ratios.pe_ratio, ratios.pb_ratio
    passed = (
        0 < pe < GRAHAM_PE_MAX
        and pb < GRAHAM_PB_MAX
        and pe * pb < GRAHAM_NUMBER_MAX
        and ratios.current_ratio >= GRAHAM_CURRENT_RATIO_MIN
        and ratios.debt_to_equity <= GRAHAM_DEBT_TO_EQUITY_MAX
    )
    return GrahamResult(passed=bool(passed), details=details)


def foreign_ownership_pct(ownership: Any) -> float | None:
    for holder in ownership_from_payload(ownership):
        name = str(holder.get("name") or "")
        if "foreign" in name.lower():
            return safe_float(holder.get("share"))
    return None
