"""Estimate models for RenoQuote.

Pydantic models for the base project estimate, the contractor-resolved
pricing, and the technician payout split.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, model_validator

# Tolerance for float products in line item totals
LINE_ITEM_TOLERANCE = 0.01


class MaterialLineItem(BaseModel):
    """One material line of an estimate.

    `quantity` is the display string ("240 sq ft", "1 set"); `units` is the
    numeric quantity the total is derived from.
    """

    item: str = Field(description="Item description")
    quantity: str = Field(description="Quantity description")
    units: float = Field(default=1.0, ge=0)
    unit_price: float = Field(alias="unitPrice", ge=0)
    total_price: float = Field(alias="totalPrice", ge=0)

    class Config:
        populate_by_name = True
        frozen = True

    @model_validator(mode="after")
    def validate_total(self) -> "MaterialLineItem":
        """Ensure total_price == units * unit_price."""
        expected = self.units * self.unit_price
        if abs(expected - self.total_price) > LINE_ITEM_TOLERANCE:
            raise ValueError(
                f"Line item '{self.item}' total {self.total_price} != "
                f"{self.units} x {self.unit_price}"
            )
        return self

    @classmethod
    def per_unit(cls, item: str, units: float, unit_label: str, unit_price: float) -> "MaterialLineItem":
        """Create a line priced per unit of a measured quantity."""
        return cls(
            item=item,
            quantity=f"{units:.0f} {unit_label}",
            units=units,
            unit_price=unit_price,
            total_price=units * unit_price,
        )

    @classmethod
    def flat(cls, item: str, price: float, quantity: str = "1") -> "MaterialLineItem":
        """Create a count-1 line with an explicit flat price."""
        return cls(item=item, quantity=quantity, units=1.0, unit_price=price, total_price=price)


class Estimate(BaseModel):
    """Materials/labor/transportation/disposal breakdown for a project.

    Independent of which contractor performs the work: labor is expressed in
    hours only, so `total` excludes labor cost.
    """

    template_id: str = Field(alias="templateId")
    materials: List[MaterialLineItem] = Field(default_factory=list)
    material_cost: int = Field(default=0, alias="materialCost", ge=0)
    labor_hours: float = Field(default=0.0, alias="laborHours", ge=0)
    transportation: int = Field(default=0, ge=0)
    disposal: int = Field(default=0, ge=0)
    complexity: Optional[str] = None
    estimated_time: Optional[str] = Field(default=None, alias="estimatedTime")
    breakdown: Dict[str, float] = Field(default_factory=dict)
    total: int = Field(default=0, ge=0)
    calculated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="calculatedAt"
    )

    class Config:
        populate_by_name = True
        frozen = True

    @model_validator(mode="after")
    def validate_total(self) -> "Estimate":
        """Total is the sum of the rounded currency components."""
        expected = self.material_cost + self.transportation + self.disposal
        if self.total != expected:
            raise ValueError(f"Estimate total {self.total} != components sum {expected}")
        return self

    @classmethod
    def zero(cls, template_id: str) -> "Estimate":
        """Documented fallback estimate: no materials, zero cost, empty breakdown."""
        return cls(template_id=template_id)

    @property
    def is_zero(self) -> bool:
        """True for the fallback estimate."""
        return not self.materials and self.total == 0 and self.labor_hours == 0

    def to_dict(self) -> Dict:
        """Convert to camelCase dict for JSON serialization."""
        return self.model_dump(by_alias=True, mode="json")


class ContractorPricing(BaseModel):
    """An estimate resolved against one contractor's hourly rate."""

    material_cost: int = Field(alias="materialCost")
    labor_cost: int = Field(alias="laborCost")
    labor_hours: float = Field(alias="laborHours")
    hourly_rate: float = Field(alias="hourlyRate")
    transportation: int
    disposal: int
    subtotal: int
    platform_fee: int = Field(alias="platformFee")
    gst: int
    total: int

    class Config:
        populate_by_name = True
        frozen = True

    def to_dict(self) -> Dict:
        return self.model_dump(by_alias=True, mode="json")


class TechnicianPayout(BaseModel):
    """Split of a project total between platform and technician."""

    platform_commission: int = Field(alias="platformCommission")
    technician_payout: int = Field(alias="technicianPayout")

    class Config:
        populate_by_name = True
        frozen = True
