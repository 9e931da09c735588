"""Contractor models for RenoQuote."""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class TechnicianTier(str, Enum):
    """Commission tier of a technician."""

    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"
    NEW = "new"


class Contractor(BaseModel):
    """A contractor offered to customers for a project.

    `commission_rate` is the technician-side commission percentage; it is
    unrelated to the customer-facing platform fee.
    """

    id: str
    name: str
    hourly_rate: float = Field(alias="hourlyRate", ge=0)
    rating: float = Field(ge=0, le=5)
    completed_jobs: int = Field(default=0, alias="completedJobs", ge=0)
    specialties: List[str] = Field(default_factory=list)
    availability: str
    distance: str
    reviews: int = 0
    tier: TechnicianTier = TechnicianTier.BRONZE
    commission_rate: float = Field(alias="commissionRate", ge=0, le=100)
    phone: Optional[str] = None
    email: Optional[str] = None

    class Config:
        populate_by_name = True
        use_enum_values = True
        frozen = True

    def public_dict(self) -> dict:
        """Contact-free view used in activity payloads and API responses."""
        return self.model_dump(by_alias=True, exclude={"phone", "email"})
