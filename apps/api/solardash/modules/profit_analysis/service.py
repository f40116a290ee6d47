"""Profit analysis service."""

from __future__ import annotations

import structlog
from pydantic import ValidationError

from solardash.core.config import settings
from solardash.models.enums import FinancingType
from solardash.modules.profit_analysis import engine
from solardash.modules.profit_analysis.schemas import (
    AnalysisInput,
    AnalysisRequest,
    AnalysisResponse,
    AnalysisResult,
    ChartPoint,
    MarketDefaultsResponse,
    SimulationRequest,
    SimulationResponse,
    YearlyData,
)

logger = structlog.get_logger()

CHART_UNIT = 10_000  # won per chart bucket

_MARKET_FIELDS = (
    "peak_hours",
    "degradation_rate",
    "smp_price",
    "rec_price",
    "rec_weight",
    "maintenance_cost",
    "monitoring_cost",
)


# ── Helpers ───────────────────────────────────────────────────────────────────


def market_defaults() -> MarketDefaultsResponse:
    """System-wide market defaults used to pre-fill analysis forms."""
    return MarketDefaultsResponse(
        smp_price=settings.DEFAULT_SMP_PRICE,
        rec_price=settings.DEFAULT_REC_PRICE,
        rec_weight=settings.DEFAULT_REC_WEIGHT,
        peak_hours=settings.DEFAULT_PEAK_HOURS,
        degradation_rate=settings.DEFAULT_DEGRADATION_RATE,
        maintenance_cost=settings.DEFAULT_MAINTENANCE_COST,
        monitoring_cost=settings.DEFAULT_MONITORING_COST,
        bank_interest_rate=settings.DEFAULT_BANK_INTEREST_RATE,
        factoring_fee_rate=settings.DEFAULT_FACTORING_FEE_RATE,
    )


def _market_params(
    body: AnalysisRequest | SimulationRequest,
    market: MarketDefaultsResponse,
) -> dict[str, float]:
    params: dict[str, float] = {}
    for field in _MARKET_FIELDS:
        value = getattr(body, field)
        params[field] = getattr(market, field) if value is None else value
    return params


def _validated(fields: dict) -> AnalysisInput:
    try:
        return AnalysisInput(**fields)
    except ValidationError as exc:
        raise engine.AnalysisInputError(str(exc)) from exc


def build_analysis_input(
    body: AnalysisRequest,
    market: MarketDefaultsResponse | None = None,
) -> AnalysisInput:
    """Merge a request with market defaults and the financing type's defaults.

    The grid-connection charge is part of the capital cost, so it is added
    to total_investment before any loan amount is derived.
    """
    market = market or market_defaults()
    total_investment = body.total_investment + body.grid_connection_charge
    defaults = engine.get_financing_defaults(body.financing_type, total_investment)

    def pick(name: str):
        value = getattr(body, name)
        return getattr(defaults, name) if value is None else value

    self_funding_rate = pick("self_funding_rate")
    interest_rate = pick("interest_rate")
    if body.financing_type is FinancingType.BANK_LOAN and body.interest_rate is None:
        interest_rate = market.bank_interest_rate
    factoring_fee_rate = pick("factoring_fee_rate")
    if body.financing_type is FinancingType.FACTORING and body.factoring_fee_rate is None:
        factoring_fee_rate = market.factoring_fee_rate

    # Keep the loan consistent with a caller-chosen self-funding rate
    loan_amount = body.loan_amount
    if loan_amount is None:
        loan_amount = total_investment * (1 - self_funding_rate)

    return _validated({
        "capacity_kw": body.capacity_kw,
        "total_investment": total_investment,
        "financing_type": body.financing_type,
        **_market_params(body, market),
        "self_funding_rate": self_funding_rate,
        "loan_amount": loan_amount,
        "interest_rate": interest_rate,
        "loan_period": pick("loan_period"),
        "grace_period": pick("grace_period"),
        "guarantee_fee_rate": pick("guarantee_fee_rate"),
        "factoring_fee_rate": factoring_fee_rate,
    })


def build_chart_series(
    yearly_data: list[YearlyData] | tuple[YearlyData, ...],
    unit: int = CHART_UNIT,
) -> list[ChartPoint]:
    """Scale yearly rows into whole chart buckets (default 10,000 won)."""
    return [
        ChartPoint(
            year=row.year,
            revenue=round(row.total_revenue / unit),
            expense=round(row.total_expense / unit),
            net_profit=round(row.net_profit / unit),
            cumulative=round(row.cumulative / unit),
        )
        for row in yearly_data
    ]


# ── Service functions ─────────────────────────────────────────────────────────


def run_analysis(body: AnalysisRequest) -> AnalysisResponse:
    """Single quotation analysis, returning the resolved input alongside the result."""
    analysis_input = build_analysis_input(body)
    result = engine.calculate_profit_analysis(analysis_input)

    logger.info(
        "profit_analysis_calculated",
        financing_type=analysis_input.financing_type.value,
        capacity_kw=analysis_input.capacity_kw,
        total_investment=analysis_input.total_investment,
        payback_period=result.payback_period,
        roi=result.roi,
    )
    return AnalysisResponse(
        analysis_input=analysis_input,
        result=result,
        chart=build_chart_series(result.yearly_data),
    )


def _scenario_inputs(body: SimulationRequest) -> dict[FinancingType, AnalysisInput]:
    market = market_defaults()
    bank_rate = (
        market.bank_interest_rate
        if body.bank_interest_rate is None
        else body.bank_interest_rate
    )
    factoring_fee = (
        market.factoring_fee_rate
        if body.factoring_fee_rate is None
        else body.factoring_fee_rate
    )
    total_investment = body.total_investment + body.grid_connection_charge
    common = {
        "capacity_kw": body.capacity_kw,
        "total_investment": total_investment,
        **_market_params(body, market),
    }

    inputs: dict[FinancingType, AnalysisInput] = {}
    for financing_type in FinancingType:
        defaults = engine.get_financing_defaults(financing_type, total_investment)
        interest_rate = defaults.interest_rate
        if financing_type is FinancingType.BANK_LOAN:
            interest_rate = bank_rate
        inputs[financing_type] = _validated({
            **common,
            "financing_type": financing_type,
            "self_funding_rate": defaults.self_funding_rate,
            "loan_amount": defaults.loan_amount,
            "interest_rate": interest_rate,
            "loan_period": defaults.loan_period,
            "grace_period": defaults.grace_period,
            "guarantee_fee_rate": defaults.guarantee_fee_rate,
            "factoring_fee_rate": (
                factoring_fee if financing_type is FinancingType.FACTORING else None
            ),
        })
    return inputs


def net_result_20y(result: AnalysisResult) -> float:
    """20-year cash position after the up-front cost."""
    return result.yearly_data[-1].cumulative


def compare_financing_models(body: SimulationRequest) -> SimulationResponse:
    """Run every financing model over the same plant and market assumptions."""
    results: dict[FinancingType, AnalysisResult] = {
        financing_type: engine.calculate_profit_analysis(analysis_input)
        for financing_type, analysis_input in _scenario_inputs(body).items()
    }

    # Ranked on the final cumulative, i.e. 20-year profit net of the up-front
    # cost. max() keeps enumeration order on ties.
    best_model = max(results, key=lambda ft: net_result_20y(results[ft]))

    logger.info(
        "financing_models_compared",
        capacity_kw=body.capacity_kw,
        total_investment=body.total_investment,
        best_model=best_model.value,
    )
    return SimulationResponse(
        self_funding=results[FinancingType.SELF_FUNDING],
        bank_loan=results[FinancingType.BANK_LOAN],
        government_loan=results[FinancingType.GOVERNMENT_LOAN],
        factoring=results[FinancingType.FACTORING],
        best_model=best_model,
    )
