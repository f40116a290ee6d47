"""Tests for the profit analysis service layer: defaults merging, comparison, charts."""

import pytest

from solardash.core.config import settings
from solardash.models.enums import FinancingType
from solardash.modules.profit_analysis import service
from solardash.modules.profit_analysis.engine import AnalysisInputError
from solardash.modules.profit_analysis.schemas import (
    AnalysisRequest,
    SimulationRequest,
    YearlyData,
)


def _row(year: int, revenue: float, expense: float, cumulative: float) -> YearlyData:
    return YearlyData(
        year=year,
        generation=0.0,
        smp_revenue=revenue,
        rec_revenue=0.0,
        total_revenue=revenue,
        loan_repayment=0.0,
        interest_payment=0.0,
        maintenance_cost=expense,
        monitoring_cost=0.0,
        total_expense=expense,
        net_profit=revenue - expense,
        cumulative=cumulative,
    )


class TestBuildAnalysisInput:
    def test_market_fields_fall_back_to_settings(self):
        body = AnalysisRequest(
            capacity_kw=50,
            total_investment=60_000_000,
            financing_type=FinancingType.SELF_FUNDING,
        )
        data = service.build_analysis_input(body)
        assert data.smp_price == settings.DEFAULT_SMP_PRICE
        assert data.rec_price == settings.DEFAULT_REC_PRICE
        assert data.peak_hours == settings.DEFAULT_PEAK_HOURS
        assert data.degradation_rate == settings.DEFAULT_DEGRADATION_RATE
        assert data.maintenance_cost == settings.DEFAULT_MAINTENANCE_COST
        assert data.self_funding_rate == 1.0
        assert data.loan_amount == 0

    def test_explicit_market_values_win(self):
        body = AnalysisRequest(
            capacity_kw=50,
            total_investment=60_000_000,
            financing_type=FinancingType.SELF_FUNDING,
            smp_price=150,
            rec_weight=1.2,
        )
        data = service.build_analysis_input(body)
        assert data.smp_price == 150
        assert data.rec_weight == 1.2

    def test_grid_charge_is_folded_into_investment(self):
        body = AnalysisRequest(
            capacity_kw=100,
            total_investment=100_000_000,
            financing_type=FinancingType.BANK_LOAN,
            grid_connection_charge=2_400_000,
        )
        data = service.build_analysis_input(body)
        assert data.total_investment == 102_400_000
        assert data.loan_amount == pytest.approx(102_400_000 * 0.8)

    def test_bank_rate_comes_from_settings(self):
        body = AnalysisRequest(
            capacity_kw=100,
            total_investment=100_000_000,
            financing_type=FinancingType.BANK_LOAN,
        )
        data = service.build_analysis_input(body)
        assert data.interest_rate == settings.DEFAULT_BANK_INTEREST_RATE
        assert data.loan_period == 10

    def test_custom_self_funding_rate_derives_loan(self):
        body = AnalysisRequest(
            capacity_kw=100,
            total_investment=100_000_000,
            financing_type=FinancingType.BANK_LOAN,
            self_funding_rate=0.3,
            interest_rate=4.0,
        )
        data = service.build_analysis_input(body)
        assert data.loan_amount == pytest.approx(70_000_000)
        assert data.interest_rate == 4.0

    def test_government_defaults(self):
        body = AnalysisRequest(
            capacity_kw=100,
            total_investment=100_000_000,
            financing_type=FinancingType.GOVERNMENT_LOAN,
        )
        data = service.build_analysis_input(body)
        assert data.interest_rate == 1.75
        assert data.grace_period == 1

    def test_factoring_fee_comes_from_settings(self):
        body = AnalysisRequest(
            capacity_kw=100,
            total_investment=100_000_000,
            financing_type=FinancingType.FACTORING,
        )
        data = service.build_analysis_input(body)
        assert data.guarantee_fee_rate == 0.05
        assert data.factoring_fee_rate == settings.DEFAULT_FACTORING_FEE_RATE

    def test_invalid_market_value_raises_input_error(self):
        body = AnalysisRequest(
            capacity_kw=100,
            total_investment=100_000_000,
            financing_type=FinancingType.SELF_FUNDING,
        )
        body = body.model_copy(update={"smp_price": float("inf")})
        with pytest.raises(AnalysisInputError):
            service.build_analysis_input(body)


class TestChartSeries:
    def test_scaled_to_ten_thousand_won(self):
        rows = [_row(1, 21_600_000, 15_680_000, -18_080_000)]
        point = service.build_chart_series(rows)[0]
        assert point.year == 1
        assert point.revenue == 2160
        assert point.expense == 1568
        assert point.net_profit == 592
        assert point.cumulative == -1808

    def test_custom_unit(self):
        rows = [_row(1, 300_000_000, 0, 100_000_000)]
        point = service.build_chart_series(rows, unit=100_000_000)[0]
        assert point.revenue == 3
        assert point.cumulative == 1


class TestCompareFinancingModels:
    def _body(self, **overrides) -> SimulationRequest:
        fields = {"capacity_kw": 100, "total_investment": 120_000_000}
        fields.update(overrides)
        return SimulationRequest(**fields)

    def test_runs_all_four_models(self):
        resp = service.compare_financing_models(self._body())
        assert resp.self_funding.initial_cost == 120_000_000
        assert resp.bank_loan.initial_cost == pytest.approx(24_000_000)
        assert resp.government_loan.initial_cost == pytest.approx(24_000_000)
        assert resp.factoring.initial_cost == pytest.approx(
            120_000_000 * (0.05 + settings.DEFAULT_FACTORING_FEE_RATE)
        )
        assert resp.government_loan.yearly_data[0].loan_repayment == 0
        assert all(r.loan_repayment == 0 for r in resp.factoring.yearly_data)

    def test_factoring_wins_baseline(self):
        # 13 % fees up front beat full equity or 20 % equity plus loan service
        resp = service.compare_financing_models(self._body())
        assert resp.best_model is FinancingType.FACTORING
        assert service.net_result_20y(resp.factoring) > service.net_result_20y(resp.self_funding)

    def test_self_funding_wins_when_factoring_fees_exceed_investment(self):
        resp = service.compare_financing_models(self._body(factoring_fee_rate=1.0))
        assert resp.best_model is FinancingType.SELF_FUNDING

    def test_best_model_has_highest_net_result(self):
        resp = service.compare_financing_models(
            self._body(capacity_kw=10, total_investment=1_000_000_000)
        )
        nets = {
            FinancingType.SELF_FUNDING: service.net_result_20y(resp.self_funding),
            FinancingType.BANK_LOAN: service.net_result_20y(resp.bank_loan),
            FinancingType.GOVERNMENT_LOAN: service.net_result_20y(resp.government_loan),
            FinancingType.FACTORING: service.net_result_20y(resp.factoring),
        }
        assert nets[resp.best_model] == max(nets.values())
        assert resp.best_model is FinancingType.FACTORING

    def test_net_result_is_profit_less_initial_cost(self):
        resp = service.compare_financing_models(self._body())
        result = resp.bank_loan
        assert service.net_result_20y(result) == pytest.approx(
            result.total_profit_20y - result.initial_cost
        )

    def test_bank_rate_override(self):
        cheap = service.compare_financing_models(self._body(bank_interest_rate=2.0))
        dear = service.compare_financing_models(self._body(bank_interest_rate=8.0))
        assert cheap.bank_loan.total_profit_20y > dear.bank_loan.total_profit_20y
        assert cheap.government_loan == dear.government_loan

    def test_factoring_fee_override(self):
        resp = service.compare_financing_models(self._body(factoring_fee_rate=0.07))
        assert resp.factoring.initial_cost == pytest.approx(120_000_000 * 0.12)
