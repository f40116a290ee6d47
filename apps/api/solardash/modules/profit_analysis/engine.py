"""
Profit analysis engine: 20-year cash-flow projection for a PV installation
under one of four financing models. Pure deterministic Python: no I/O, no
clock, no shared state, so concurrent calls are always safe.

Monetary figures are kept at full precision; rounding belongs to the
presentation layer. The only rounded output is ROI (one decimal).
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from solardash.models.enums import FinancingType
from solardash.modules.profit_analysis.schemas import (
    AnalysisInput,
    AnalysisResult,
    AnalysisSummary,
    FinancingDefaults,
    LoanService,
    YearlyData,
)

logger = structlog.get_logger()

ANALYSIS_YEARS = 20
DAYS_PER_YEAR = 365
KWH_PER_REC = 1000  # 1 REC = 1 MWh

BANK_INTEREST_RATE = 5.5        # market rate, %
GOVERNMENT_INTEREST_RATE = 1.75  # fixed, %
GUARANTEE_FEE_RATE = 0.05
FACTORING_FEE_RATE = 0.08

_NO_SERVICE = LoanService(principal=0.0, interest=0.0)


class AnalysisInputError(ValueError):
    """Structurally invalid analysis input."""


def _coerce_financing_type(value: FinancingType | str) -> FinancingType:
    try:
        return FinancingType(value)
    except ValueError as exc:
        raise AnalysisInputError(f"Unknown financing type: {value!r}") from exc


def _coerce_input(data: AnalysisInput | Mapping[str, Any]) -> AnalysisInput:
    if isinstance(data, AnalysisInput):
        return data
    try:
        return AnalysisInput.model_validate(data)
    except ValidationError as exc:
        raise AnalysisInputError(str(exc)) from exc


# ── Financing defaults ───────────────────────────────────────────────────────


def get_financing_defaults(
    financing_type: FinancingType | str,
    total_investment: float,
) -> FinancingDefaults:
    """Starting terms for a financing model.

    GOVERNMENT_LOAN repays over 10 years after one interest-only year.
    FACTORING carries the bank terms for reference only; the engine charges
    its fees up front instead of servicing a loan.
    """
    financing_type = _coerce_financing_type(financing_type)
    if not math.isfinite(total_investment) or total_investment < 0:
        raise AnalysisInputError("total_investment must be a finite, non-negative number")

    if financing_type is FinancingType.SELF_FUNDING:
        return FinancingDefaults(
            financing_type=financing_type,
            self_funding_rate=1.0,
            loan_amount=0.0,
            interest_rate=0.0,
            loan_period=0,
            grace_period=0,
        )
    if financing_type is FinancingType.BANK_LOAN:
        return FinancingDefaults(
            financing_type=financing_type,
            self_funding_rate=0.2,
            loan_amount=total_investment * 0.8,
            interest_rate=BANK_INTEREST_RATE,
            loan_period=10,
            grace_period=0,
        )
    if financing_type is FinancingType.GOVERNMENT_LOAN:
        return FinancingDefaults(
            financing_type=financing_type,
            self_funding_rate=0.2,
            loan_amount=total_investment * 0.8,
            interest_rate=GOVERNMENT_INTEREST_RATE,
            loan_period=10,
            grace_period=1,
        )
    if financing_type is FinancingType.FACTORING:
        return FinancingDefaults(
            financing_type=financing_type,
            self_funding_rate=0.0,
            loan_amount=total_investment,
            interest_rate=BANK_INTEREST_RATE,
            loan_period=5,
            grace_period=0,
            guarantee_fee_rate=GUARANTEE_FEE_RATE,
            factoring_fee_rate=FACTORING_FEE_RATE,
        )
    raise AnalysisInputError(f"Unhandled financing type: {financing_type!r}")


# ── Amortization ─────────────────────────────────────────────────────────────


def loan_service_for_year(
    year_index: int,
    loan_amount: float,
    annual_rate_percent: float,
    loan_period_years: int,
    grace_period_years: int = 0,
) -> LoanService:
    """Principal and interest due in a 1-based loan year.

    Equal-principal repayment: grace years pay interest on the full amount,
    then each repayment year retires loan_amount / loan_period_years and pays
    interest on the balance outstanding at the start of that year.
    """
    if year_index < 1:
        raise AnalysisInputError("year_index is 1-based")
    if loan_amount <= 0:
        return _NO_SERVICE

    rate = annual_rate_percent / 100
    if year_index <= grace_period_years:
        return LoanService(principal=0.0, interest=loan_amount * rate)

    repayment_year = year_index - grace_period_years
    if loan_period_years <= 0 or repayment_year > loan_period_years:
        return _NO_SERVICE

    principal = loan_amount / loan_period_years
    outstanding = loan_amount - principal * (repayment_year - 1)
    return LoanService(principal=principal, interest=outstanding * rate)


# ── Projection ───────────────────────────────────────────────────────────────


def initial_cost_for(data: AnalysisInput) -> float:
    """Out-of-pocket amount at time zero."""
    financing_type = data.financing_type
    if financing_type is FinancingType.SELF_FUNDING:
        return data.total_investment
    if financing_type in (FinancingType.BANK_LOAN, FinancingType.GOVERNMENT_LOAN):
        return data.total_investment * data.self_funding_rate
    if financing_type is FinancingType.FACTORING:
        guarantee = GUARANTEE_FEE_RATE if data.guarantee_fee_rate is None else data.guarantee_fee_rate
        factoring = FACTORING_FEE_RATE if data.factoring_fee_rate is None else data.factoring_fee_rate
        return data.total_investment * (guarantee + factoring)
    raise AnalysisInputError(f"Unhandled financing type: {financing_type!r}")


def resolve_loan_amount(data: AnalysisInput) -> float:
    """Loan principal actually serviced; 0 for models without yearly loan service."""
    if data.financing_type in (FinancingType.SELF_FUNDING, FinancingType.FACTORING):
        return 0.0

    derived = data.total_investment * (1 - data.self_funding_rate)
    if data.loan_amount is None:
        return derived
    if not math.isclose(data.loan_amount, derived, rel_tol=1e-9, abs_tol=1.0):
        logger.warning(
            "loan_amount_mismatch",
            financing_type=data.financing_type.value,
            loan_amount=data.loan_amount,
            expected=derived,
        )
    return data.loan_amount


def project_years(data: AnalysisInput, initial_cost: float) -> list[YearlyData]:
    """Year-by-year cash flow for the analysis horizon.

    Generation decays geometrically from the year-1 baseline. The initial
    cost seeds the running cumulative, so year 1 already reflects it.
    """
    loan_amount = resolve_loan_amount(data)
    base_generation = data.capacity_kw * data.peak_hours * DAYS_PER_YEAR

    rows: list[YearlyData] = []
    cumulative = -initial_cost
    for year in range(1, ANALYSIS_YEARS + 1):
        generation = base_generation * (1 - data.degradation_rate) ** (year - 1)
        smp_revenue = generation * data.smp_price
        rec_revenue = generation / KWH_PER_REC * data.rec_weight * data.rec_price
        total_revenue = smp_revenue + rec_revenue

        service = loan_service_for_year(
            year,
            loan_amount,
            data.interest_rate,
            data.loan_period,
            data.grace_period,
        )
        total_expense = (
            service.principal
            + service.interest
            + data.maintenance_cost
            + data.monitoring_cost
        )

        net_profit = total_revenue - total_expense
        cumulative += net_profit

        rows.append(YearlyData(
            year=year,
            generation=generation,
            smp_revenue=smp_revenue,
            rec_revenue=rec_revenue,
            total_revenue=total_revenue,
            loan_repayment=service.principal,
            interest_payment=service.interest,
            maintenance_cost=data.maintenance_cost,
            monitoring_cost=data.monitoring_cost,
            total_expense=total_expense,
            net_profit=net_profit,
            cumulative=cumulative,
        ))
    return rows


# ── Summary ──────────────────────────────────────────────────────────────────


def _payback_period(yearly_data: list[YearlyData] | tuple[YearlyData, ...], initial_cost: float) -> float:
    previous = -initial_cost
    for row in yearly_data:
        if previous < 0 <= row.cumulative:
            # Linear interpolation inside the year the deficit closes
            return row.year - 1 + (-previous) / row.net_profit
        previous = row.cumulative
    return 0.0


def summarize(
    yearly_data: list[YearlyData] | tuple[YearlyData, ...],
    initial_cost: float,
) -> AnalysisSummary:
    """Payback, 20-year totals and ROI.

    total_profit_20y is the sum of operating net profit; the initial cost
    is not subtracted again. ROI is None when nothing was paid up front.
    """
    total_profit = sum(row.net_profit for row in yearly_data)
    roi = round(total_profit / initial_cost * 100, 1) if initial_cost > 0 else None

    return AnalysisSummary(
        payback_period=_payback_period(yearly_data, initial_cost),
        total_profit_20y=total_profit,
        roi=roi,
        total_revenue_20y=sum(row.total_revenue for row in yearly_data),
        total_expense_20y=sum(row.total_expense for row in yearly_data),
    )


# ── Public entry point ───────────────────────────────────────────────────────


def calculate_profit_analysis(data: AnalysisInput | Mapping[str, Any]) -> AnalysisResult:
    """Run a full 20-year profit analysis.

    Accepts a validated AnalysisInput or a plain mapping of its fields;
    invalid mappings raise AnalysisInputError.
    """
    data = _coerce_input(data)
    initial_cost = initial_cost_for(data)
    yearly_data = project_years(data, initial_cost)
    summary = summarize(yearly_data, initial_cost)

    return AnalysisResult(
        yearly_data=tuple(yearly_data),
        payback_period=summary.payback_period,
        total_profit_20y=summary.total_profit_20y,
        roi=summary.roi,
        initial_cost=initial_cost,
        total_revenue_20y=summary.total_revenue_20y,
        total_expense_20y=summary.total_expense_20y,
    )
