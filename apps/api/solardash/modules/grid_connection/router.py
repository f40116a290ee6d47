"""Grid-connection charge API router."""

import structlog
from fastapi import APIRouter

from solardash.modules.grid_connection import calculator
from solardash.modules.grid_connection.schemas import GridChargeRequest, GridChargeResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/grid-connection", tags=["grid-connection"])


@router.post("/calculate", response_model=GridChargeResponse)
async def calculate_charge(body: GridChargeRequest) -> GridChargeResponse:
    """Utility grid-connection charge to fold into a quotation's total investment."""
    calc = calculator.calculate_grid_charge(
        capacity_kw=body.capacity_kw,
        voltage=body.voltage_type,
        supply=body.supply_type,
        distance_charge=body.distance_charge,
        payment=body.payment_type,
    )

    logger.info(
        "grid_charge_calculated",
        capacity_kw=body.capacity_kw,
        voltage_type=body.voltage_type.value,
        total_charge=calc["total_charge"],
    )
    return GridChargeResponse(**calc)
