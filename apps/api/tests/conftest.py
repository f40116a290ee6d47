"""Shared test fixtures for the SolarDash API test suite."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from solardash.main import app
from solardash.models.enums import FinancingType
from solardash.modules.profit_analysis.schemas import AnalysisInput


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Sample inputs ──────────────────────────────────────────────────────────

MARKET = {
    "peak_hours": 3.7,
    "degradation_rate": 0.008,
    "smp_price": 120,
    "rec_price": 40_000,
    "rec_weight": 1.0,
    "maintenance_cost": 500_000,
    "monitoring_cost": 300_000,
}


@pytest.fixture
def bank_loan_input() -> AnalysisInput:
    """100 kW plant, 120M won, 20 % equity, 10-year bank loan at 5.5 %."""
    return AnalysisInput(
        capacity_kw=100,
        total_investment=120_000_000,
        financing_type=FinancingType.BANK_LOAN,
        **MARKET,
        self_funding_rate=0.2,
        loan_amount=96_000_000,
        interest_rate=5.5,
        loan_period=10,
        grace_period=0,
    )


@pytest.fixture
def market_params() -> dict:
    return dict(MARKET)
