"""Grid-connection charge schemas."""

from pydantic import BaseModel, ConfigDict, Field

from solardash.models.enums import PaymentType, SupplyType, VoltageType


class GridChargeRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    capacity_kw: float = Field(gt=0)
    voltage_type: VoltageType = VoltageType.LOW
    supply_type: SupplyType = SupplyType.OVERHEAD
    distance_charge: int = Field(default=0, ge=0)  # won, quoted by the utility
    payment_type: PaymentType = PaymentType.LUMP_SUM


class ChargeLine(BaseModel):
    description: str
    amount: int


class InstallmentItem(BaseModel):
    month: int
    principal: int
    interest: int
    total: int
    remaining_balance: int


class InstallmentPlan(BaseModel):
    down_payment: int
    remaining: int
    monthly_principal: int
    schedule: list[InstallmentItem]
    total_interest: int
    total_with_interest: int


class GridChargeResponse(BaseModel):
    capacity_kw: float
    voltage_type: VoltageType
    supply_type: SupplyType
    basic_charge: int
    basic_charge_breakdown: list[ChargeLine]
    distance_charge: int
    total_charge: int
    payment_type: PaymentType
    installment: InstallmentPlan | None  # only for INSTALLMENT payments
