"""Quote simulation models for RenoQuote."""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, Field

from models.estimate import ContractorPricing


class QuoteSessionState(str, Enum):
    """Overall state of a project's quote request."""

    NOT_REQUESTED = "not_requested"
    REQUESTED = "requested"


class QuoteStatus(str, Enum):
    """Per-contractor quote state."""

    PENDING = "pending"
    RECEIVED = "received"
    FINALIZED = "finalized"


class Quote(ContractorPricing):
    """A contractor's one-time offer.

    All pricing fields are copied from the asking price; only `total` carries
    the simulated perturbation.
    """

    contractor_id: str = Field(alias="contractorId")
    message: str
    confirmed: bool = True
    responded_at: datetime = Field(alias="respondedAt")


class QuoteRequestResult(BaseModel):
    """Outcome of a quote request, surfaced to the customer."""

    accepted: bool
    message: str
    state: QuoteSessionState
    asking_prices: Dict[str, ContractorPricing] = Field(default_factory=dict, alias="askingPrices")
    error_code: Optional[str] = Field(default=None, alias="errorCode")

    class Config:
        populate_by_name = True
        use_enum_values = True
