"""
Charge calculator - turns a flat and the society's monthly charge types
into bill line items.

Pure computation: takes its inputs as arguments and touches no session, so
it is shared by bill generation and bill previews.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from database.models import CalculationType, VehicleType, OccupancyType
from schemas.settings import BillingSettings
from services.base import to_money


NOC_CODE = "noc"
NOC_DESCRIPTION = "Non-Occupancy Charges (NOC)"


@dataclass
class ChargeLine:
    description: str
    amount: Decimal
    charge_type_id: Optional[int] = None
    code: Optional[str] = None


@dataclass
class ChargeResult:
    line_items: List[ChargeLine] = field(default_factory=list)
    total_amount: Decimal = Decimal("0.00")


def _format_multiplier(multiplier: Decimal) -> str:
    # 2.00 -> "2", 1.50 -> "1.5"
    return format(multiplier.normalize(), "f")


def parking_multiplier(flat, settings: BillingSettings) -> Decimal:
    """Tenant-occupied flats pay parking at the configured multiple."""
    if flat.occupancy_type == OccupancyType.TENANT.value:
        return Decimal(str(settings.tenant_parking_multiplier or 1))
    return Decimal("1")


def vehicle_count_for(flat, vehicle_type: Optional[str]) -> int:
    if vehicle_type == VehicleType.TWO_WHEELER.value:
        return flat.two_wheeler_count or 0
    if vehicle_type == VehicleType.FOUR_WHEELER.value:
        return flat.four_wheeler_count or 0
    return 0


def calculate_charge(flat, charge_type, multiplier: Decimal = Decimal("1")) -> ChargeLine:
    """
    Compute one line item. Unknown calculation types produce a zero amount,
    which the caller drops.
    """
    rate = Decimal(str(charge_type.default_amount or 0))
    description = charge_type.name
    calc = charge_type.calculation_type

    if calc == CalculationType.FIXED.value:
        amount = rate
    elif calc == CalculationType.PER_SQFT.value:
        amount = Decimal(str(flat.area or 0)) * rate
    elif calc == CalculationType.PER_VEHICLE.value:
        count = vehicle_count_for(flat, charge_type.vehicle_type)
        amount = count * rate * multiplier
        if count > 0:
            description = f"{charge_type.name} ({count} vehicle{'s' if count > 1 else ''})"
            if multiplier > 1:
                description += f" [{_format_multiplier(multiplier)}x tenant rate]"
    else:
        amount = Decimal("0")

    return ChargeLine(
        description=description,
        amount=to_money(amount),
        charge_type_id=charge_type.id,
    )


def calculate_charges(flat, charge_types: Iterable, settings: BillingSettings) -> ChargeResult:
    """
    Line items for one flat for one billing period.

    charge_types must already be filtered to active + monthly; their order
    is the display order on the bill. Zero-amount lines are omitted. A
    tenant-occupied flat gets an extra NOC line when NOC is enabled.
    """
    result = ChargeResult()
    multiplier = parking_multiplier(flat, settings)

    for charge_type in charge_types:
        line = calculate_charge(flat, charge_type, multiplier)
        if line.amount > 0:
            result.line_items.append(line)

    noc_amount = to_money(settings.noc_amount)
    if (
        flat.occupancy_type == OccupancyType.TENANT.value
        and settings.noc_enabled
        and noc_amount > 0
    ):
        result.line_items.append(ChargeLine(
            description=NOC_DESCRIPTION,
            amount=noc_amount,
            code=NOC_CODE,
        ))

    result.total_amount = to_money(sum((line.amount for line in result.line_items), Decimal("0")))
    return result
