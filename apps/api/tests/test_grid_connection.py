"""Tests for the grid-connection charge calculator and its endpoint."""

import pytest
from httpx import AsyncClient

from solardash.models.enums import PaymentType, SupplyType, VoltageType
from solardash.modules.grid_connection import calculator
from solardash.modules.grid_connection.calculator import GridChargeInputError


class TestBasicCharge:
    def test_low_voltage_within_base(self):
        assert calculator.basic_charge(3, VoltageType.LOW, SupplyType.OVERHEAD) == 306_000

    def test_low_voltage_above_base(self):
        # 306,000 + 5 kW × 121,000
        assert calculator.basic_charge(10, VoltageType.LOW, SupplyType.OVERHEAD) == 911_000

    def test_low_voltage_partial_kw_rounds_up(self):
        assert calculator.basic_charge(5.5, VoltageType.LOW, SupplyType.UNDERGROUND) == 729_000

    def test_high_voltage_per_kw(self):
        assert calculator.basic_charge(99.2, VoltageType.HIGH, SupplyType.OVERHEAD) == 2_400_000

    def test_extra_high_voltage_underground(self):
        assert calculator.basic_charge(100, VoltageType.EXTRA_HIGH, SupplyType.UNDERGROUND) == 5_000_000

    def test_breakdown_lines(self):
        lines = calculator.basic_charge_breakdown(10, VoltageType.LOW, SupplyType.OVERHEAD)
        assert [line["amount"] for line in lines] == [306_000, 605_000]

    def test_non_positive_capacity_rejected(self):
        with pytest.raises(GridChargeInputError):
            calculator.basic_charge(0, VoltageType.LOW, SupplyType.OVERHEAD)


class TestInstallments:
    def test_down_payment_and_schedule(self):
        plan = calculator.installment_schedule(1_000_000)
        assert plan["down_payment"] == 300_000
        assert plan["remaining"] == 700_000
        assert plan["monthly_principal"] == 58_333
        schedule = plan["schedule"]
        assert len(schedule) == 12
        assert sum(item["principal"] for item in schedule) == 700_000
        assert schedule[-1]["principal"] == 700_000 - 11 * 58_333
        assert schedule[-1]["remaining_balance"] == 0

    def test_interest_declines_with_balance(self):
        schedule = calculator.installment_schedule(5_000_000)["schedule"]
        for prev, cur in zip(schedule, schedule[1:]):
            assert cur["interest"] <= prev["interest"]
            assert cur["total"] == cur["principal"] + cur["interest"]

    def test_totals(self):
        plan = calculator.installment_schedule(2_400_000)
        assert plan["total_interest"] == sum(item["interest"] for item in plan["schedule"])
        assert plan["total_with_interest"] == 2_400_000 + plan["total_interest"]


class TestCalculateGridCharge:
    def test_lump_sum_has_no_plan(self):
        result = calculator.calculate_grid_charge(
            100, VoltageType.HIGH, SupplyType.OVERHEAD, distance_charge=1_000_000
        )
        assert result["basic_charge"] == 2_400_000
        assert result["total_charge"] == 3_400_000
        assert result["installment"] is None

    def test_installment_plan_attached(self):
        result = calculator.calculate_grid_charge(
            100, VoltageType.HIGH, SupplyType.OVERHEAD, payment=PaymentType.INSTALLMENT
        )
        assert result["installment"]["down_payment"] == 720_000

    def test_negative_distance_rejected(self):
        with pytest.raises(GridChargeInputError):
            calculator.calculate_grid_charge(
                10, VoltageType.LOW, SupplyType.OVERHEAD, distance_charge=-1
            )


class TestGridConnectionAPI:
    pytestmark = pytest.mark.anyio

    async def test_calculate_200(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/v1/grid-connection/calculate",
            json={
                "capacity_kw": 10,
                "voltage_type": "LOW",
                "supply_type": "OVERHEAD",
                "payment_type": "INSTALLMENT",
            },
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["total_charge"] == 911_000
        assert len(data["basic_charge_breakdown"]) == 2
        assert len(data["installment"]["schedule"]) == 12

    async def test_zero_capacity_422(self, client: AsyncClient) -> None:
        resp = await client.post("/v1/grid-connection/calculate", json={"capacity_kw": 0})
        assert resp.status_code == 422
