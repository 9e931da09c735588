"""
Fee & Commission service for RenoQuote.

Pure arithmetic layered on a base Estimate:
- platform fee charged on the customer-facing subtotal (10%, capped at $399
  up to $30,000; 5% uncapped above)
- 5% GST on subtotal + platform fee
- contractor-specific totals for a given hourly rate
- technician payout after the technician-side commission

The platform fee and the technician commission are independent concepts and
are never netted against each other.
"""

from typing import Union

from config.errors import ErrorCode, ValidationError
from models.estimate import ContractorPricing, Estimate, TechnicianPayout
from utils.numbers import round_half_up

Number = Union[int, float]

PLATFORM_FEE_RATE = 0.10
PLATFORM_FEE_CAP = 399
PLATFORM_FEE_THRESHOLD = 30000
HIGH_VALUE_FEE_RATE = 0.05
GST_RATE = 0.05


def calculate_platform_fee(subtotal: Number) -> Number:
    """Platform fee for a customer subtotal.

    At or below the threshold the fee is 10% capped at $399 and is returned
    unrounded; above it the fee is 5%, rounded, with no cap, so the fee jumps
    from $399 to $1,500 at the threshold.
    """
    if subtotal > PLATFORM_FEE_THRESHOLD:
        return round_half_up(subtotal * HIGH_VALUE_FEE_RATE)
    return min(subtotal * PLATFORM_FEE_RATE, PLATFORM_FEE_CAP)


def calculate_contractor_total(estimate: Estimate, hourly_rate: Number) -> ContractorPricing:
    """Resolve an estimate against one contractor's hourly rate.

    Intermediate values are kept unrounded; each reported component is
    rounded half-up independently, so `total` may differ by one from the sum
    of the rounded parts.

    Raises:
        ValidationError: If the hourly rate is negative.
    """
    if hourly_rate < 0:
        raise ValidationError(
            message=f"Hourly rate must be non-negative, got {hourly_rate}",
            field="hourlyRate",
            code=ErrorCode.INVALID_FIELD,
        )

    labor_cost = estimate.labor_hours * hourly_rate
    subtotal = estimate.material_cost + labor_cost + estimate.transportation + estimate.disposal
    platform_fee = calculate_platform_fee(subtotal)
    gst = (subtotal + platform_fee) * GST_RATE
    total = subtotal + platform_fee + gst

    return ContractorPricing(
        material_cost=estimate.material_cost,
        labor_cost=round_half_up(labor_cost),
        labor_hours=estimate.labor_hours,
        hourly_rate=hourly_rate,
        transportation=estimate.transportation,
        disposal=estimate.disposal,
        subtotal=round_half_up(subtotal),
        platform_fee=round_half_up(platform_fee),
        gst=round_half_up(gst),
        total=round_half_up(total),
    )


def calculate_technician_payout(project_total: Number, commission_rate_percent: Number) -> TechnicianPayout:
    """Split a project total between the platform commission and the technician.

    The payout is rounded and the commission is the remainder, so both parts
    always add back up to the rounded project total.

    Raises:
        ValidationError: If the commission rate is outside 0-100 or the total is negative.
    """
    if not 0 <= commission_rate_percent <= 100:
        raise ValidationError(
            message=f"Commission rate must be between 0 and 100, got {commission_rate_percent}",
            field="commissionRate",
            code=ErrorCode.INVALID_FIELD,
        )
    if project_total < 0:
        raise ValidationError(
            message=f"Project total must be non-negative, got {project_total}",
            field="projectTotal",
            code=ErrorCode.INVALID_FIELD,
        )

    payout = round_half_up(project_total * (1 - commission_rate_percent / 100))
    return TechnicianPayout(
        platform_commission=round_half_up(project_total) - payout,
        technician_payout=payout,
    )
