"""Profit analysis API router. All calculations are deterministic Python.

AnalysisInputError raised below is mapped to a 422 envelope by the app's
exception handlers.
"""

import structlog
from fastapi import APIRouter, Query

from solardash.models.enums import (
    FINANCING_TYPE_DESCRIPTIONS,
    FINANCING_TYPE_LABELS,
    FinancingType,
)
from solardash.modules.profit_analysis import engine, service
from solardash.modules.profit_analysis.schemas import (
    AnalysisRequest,
    AnalysisResponse,
    FinancingDefaultsResponse,
    MarketDefaultsResponse,
    SimulationRequest,
    SimulationResponse,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/profit-analysis", tags=["profit-analysis"])


@router.get("/market-defaults", response_model=MarketDefaultsResponse)
async def get_market_defaults() -> MarketDefaultsResponse:
    """System-wide SMP, REC, degradation and O&M defaults."""
    return service.market_defaults()


@router.get(
    "/financing-defaults/{financing_type}",
    response_model=FinancingDefaultsResponse,
)
async def get_financing_defaults(
    financing_type: FinancingType,
    total_investment: float = Query(0.0, ge=0),
) -> FinancingDefaultsResponse:
    """Starting financing terms for one model, with its display label."""
    defaults = engine.get_financing_defaults(financing_type, total_investment)
    return FinancingDefaultsResponse(
        **defaults.model_dump(),
        label=FINANCING_TYPE_LABELS[financing_type],
        description=FINANCING_TYPE_DESCRIPTIONS[financing_type],
    )


@router.post("/calculate", response_model=AnalysisResponse)
async def calculate(body: AnalysisRequest) -> AnalysisResponse:
    """20-year profit analysis for a single financing model."""
    return service.run_analysis(body)


@router.post("/simulate", response_model=SimulationResponse)
async def simulate(body: SimulationRequest) -> SimulationResponse:
    """Side-by-side comparison of all four financing models."""
    return service.compare_financing_models(body)
