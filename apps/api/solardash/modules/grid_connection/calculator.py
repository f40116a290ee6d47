"""Pure deterministic grid-connection charge calculations. No DB."""

import math

from solardash.models.enums import PaymentType, SupplyType, VoltageType

# Low voltage: flat base for the first 5 kW, then per started kW above it
LOW_VOLTAGE_BASE_KW = 5
LOW_VOLTAGE_RATES: dict[SupplyType, dict[str, int]] = {
    SupplyType.OVERHEAD: {"base": 306_000, "extra": 121_000},
    SupplyType.UNDERGROUND: {"base": 588_000, "extra": 141_000},
}
# High / extra-high voltage: per started kW
PER_KW_RATES: dict[SupplyType, int] = {
    SupplyType.OVERHEAD: 24_000,
    SupplyType.UNDERGROUND: 50_000,
}

INSTALLMENT_DOWN_PAYMENT_RATE = 0.3
INSTALLMENT_MONTHS = 12
INSTALLMENT_ANNUAL_RATE = 0.0321


class GridChargeInputError(ValueError):
    """Invalid grid-connection charge input."""


def _round_won(value: float) -> int:
    """Half-up rounding to whole won."""
    return math.floor(value + 0.5)


def basic_charge_breakdown(
    capacity_kw: float,
    voltage: VoltageType,
    supply: SupplyType,
) -> list[dict]:
    """Line items making up the basic facility charge."""
    if capacity_kw <= 0:
        raise GridChargeInputError("capacity_kw must be positive")

    if voltage is VoltageType.LOW:
        rates = LOW_VOLTAGE_RATES[supply]
        lines = [{"description": f"Base up to {LOW_VOLTAGE_BASE_KW} kW", "amount": rates["base"]}]
        if capacity_kw > LOW_VOLTAGE_BASE_KW:
            extra_kw = math.ceil(capacity_kw - LOW_VOLTAGE_BASE_KW)
            lines.append({
                "description": f"{extra_kw} kW above {LOW_VOLTAGE_BASE_KW} kW × {rates['extra']:,} won",
                "amount": extra_kw * rates["extra"],
            })
        return lines

    rate = PER_KW_RATES[supply]
    kw = math.ceil(capacity_kw)
    return [{"description": f"{kw} kW × {rate:,} won", "amount": kw * rate}]


def basic_charge(capacity_kw: float, voltage: VoltageType, supply: SupplyType) -> int:
    return sum(line["amount"] for line in basic_charge_breakdown(capacity_kw, voltage, supply))


def installment_schedule(total_charge: int) -> dict:
    """
    Split a charge into a 30 % down payment and 12 monthly instalments.

    Monthly principal is equal (rounded); the last month takes whatever
    balance is left. Interest accrues monthly on the opening balance.
    """
    down_payment = _round_won(total_charge * INSTALLMENT_DOWN_PAYMENT_RATE)
    remaining = total_charge - down_payment
    monthly_principal = _round_won(remaining / INSTALLMENT_MONTHS)

    schedule = []
    balance = remaining
    for month in range(1, INSTALLMENT_MONTHS + 1):
        principal = balance if month == INSTALLMENT_MONTHS else monthly_principal
        interest = _round_won(balance * INSTALLMENT_ANNUAL_RATE / 12)
        schedule.append({
            "month": month,
            "principal": principal,
            "interest": interest,
            "total": principal + interest,
            "remaining_balance": balance - principal,
        })
        balance -= principal

    total_interest = sum(item["interest"] for item in schedule)
    return {
        "down_payment": down_payment,
        "remaining": remaining,
        "monthly_principal": monthly_principal,
        "schedule": schedule,
        "total_interest": total_interest,
        "total_with_interest": total_charge + total_interest,
    }


def calculate_grid_charge(
    capacity_kw: float,
    voltage: VoltageType,
    supply: SupplyType,
    distance_charge: int = 0,
    payment: PaymentType = PaymentType.LUMP_SUM,
) -> dict:
    """Total grid-connection charge, with an instalment plan when requested."""
    if distance_charge < 0:
        raise GridChargeInputError("distance_charge must not be negative")

    breakdown = basic_charge_breakdown(capacity_kw, voltage, supply)
    basic = sum(line["amount"] for line in breakdown)
    total = basic + distance_charge

    return {
        "capacity_kw": capacity_kw,
        "voltage_type": voltage,
        "supply_type": supply,
        "basic_charge": basic,
        "basic_charge_breakdown": breakdown,
        "distance_charge": distance_charge,
        "total_charge": total,
        "payment_type": payment,
        "installment": installment_schedule(total) if payment is PaymentType.INSTALLMENT else None,
    }
