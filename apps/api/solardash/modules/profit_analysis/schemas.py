"""Profit analysis schemas: engine data shapes and API request/response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from solardash.models.enums import FinancingType


# ── Engine data shapes ───────────────────────────────────────────────────────


class AnalysisInput(BaseModel):
    """One calculation's inputs. All amounts in won, rates as noted."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    capacity_kw: float = Field(ge=0)
    total_investment: float = Field(ge=0)
    financing_type: FinancingType

    peak_hours: float                 # equivalent sun-hours per day
    degradation_rate: float           # fractional, 0.008 = 0.8 %/yr
    smp_price: float                  # won/kWh
    rec_price: float                  # won/REC
    rec_weight: float = 1.0
    maintenance_cost: float           # won/yr
    monitoring_cost: float            # won/yr

    self_funding_rate: float = Field(ge=0, le=1)
    loan_amount: float | None = Field(default=None, ge=0)  # derived when omitted
    interest_rate: float = Field(default=0.0, ge=0)        # percent, 5.5 = 5.5 %
    loan_period: int = Field(default=0, ge=0)              # repayment years, grace excluded
    grace_period: int = Field(default=0, ge=0)             # interest-only years

    # FACTORING only: one-time fees on total_investment
    guarantee_fee_rate: float | None = Field(default=None, ge=0)
    factoring_fee_rate: float | None = Field(default=None, ge=0)


class FinancingDefaults(BaseModel):
    model_config = ConfigDict(frozen=True)

    financing_type: FinancingType
    self_funding_rate: float
    loan_amount: float
    interest_rate: float
    loan_period: int
    grace_period: int
    guarantee_fee_rate: float | None = None
    factoring_fee_rate: float | None = None


class LoanService(BaseModel):
    model_config = ConfigDict(frozen=True)

    principal: float
    interest: float


class YearlyData(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    generation: float          # kWh
    smp_revenue: float
    rec_revenue: float
    total_revenue: float
    loan_repayment: float      # principal portion
    interest_payment: float
    maintenance_cost: float
    monitoring_cost: float
    total_expense: float
    net_profit: float
    cumulative: float          # includes the initial out-of-pocket cost


class AnalysisSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    payback_period: float      # fractional years; 0 means not recovered
    total_profit_20y: float
    roi: float | None          # None when there is no up-front cost
    total_revenue_20y: float
    total_expense_20y: float


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    yearly_data: tuple[YearlyData, ...]
    payback_period: float
    total_profit_20y: float
    roi: float | None
    initial_cost: float
    total_revenue_20y: float
    total_expense_20y: float


# ── API ──────────────────────────────────────────────────────────────────────


class MarketDefaultsResponse(BaseModel):
    smp_price: float
    rec_price: float
    rec_weight: float
    peak_hours: float
    degradation_rate: float
    maintenance_cost: float
    monitoring_cost: float
    bank_interest_rate: float
    factoring_fee_rate: float


class _MarketOverrides(BaseModel):
    """Market parameters; any left as None fall back to the system defaults."""

    model_config = ConfigDict(allow_inf_nan=False)

    peak_hours: float | None = None
    degradation_rate: float | None = None
    smp_price: float | None = None
    rec_price: float | None = None
    rec_weight: float | None = None
    maintenance_cost: float | None = None
    monitoring_cost: float | None = None
    # Utility grid-connection charge folded into total_investment
    grid_connection_charge: float = Field(default=0.0, ge=0)


class AnalysisRequest(_MarketOverrides):
    capacity_kw: float = Field(ge=0)
    total_investment: float = Field(ge=0)
    financing_type: FinancingType

    # Financing terms; None means "use the financing type's defaults"
    self_funding_rate: float | None = Field(default=None, ge=0, le=1)
    loan_amount: float | None = Field(default=None, ge=0)
    interest_rate: float | None = Field(default=None, ge=0)
    loan_period: int | None = Field(default=None, ge=0)
    grace_period: int | None = Field(default=None, ge=0)
    guarantee_fee_rate: float | None = Field(default=None, ge=0)
    factoring_fee_rate: float | None = Field(default=None, ge=0)


class SimulationRequest(_MarketOverrides):
    capacity_kw: float = Field(gt=0)
    total_investment: float = Field(gt=0)
    bank_interest_rate: float | None = Field(default=None, ge=0)
    factoring_fee_rate: float | None = Field(default=None, ge=0)


class FinancingDefaultsResponse(FinancingDefaults):
    label: str
    description: str


class ChartPoint(BaseModel):
    """One year of chart data, scaled to 10,000-won buckets."""

    year: int
    revenue: int
    expense: int
    net_profit: int
    cumulative: int


class AnalysisResponse(BaseModel):
    analysis_input: AnalysisInput
    result: AnalysisResult
    chart: list[ChartPoint]


class SimulationResponse(BaseModel):
    self_funding: AnalysisResult
    bank_loan: AnalysisResult
    government_loan: AnalysisResult
    factoring: AnalysisResult
    best_model: FinancingType  # highest 20-year cumulative, net of initial cost
