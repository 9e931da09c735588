"""Activity event model for RenoQuote."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4
from pydantic import BaseModel, Field


class ActivityAction:
    """Activity event names."""

    ESTIMATE_CALCULATED = "ESTIMATE_CALCULATED"
    CONTRACTOR_SELECTED = "CONTRACTOR_SELECTED"
    QUOTES_REQUESTED = "QUOTES_REQUESTED"
    QUOTES_RECEIVED = "QUOTES_RECEIVED"
    CONTRACTOR_FINALIZED = "CONTRACTOR_FINALIZED"
    PROJECT_CREATED = "PROJECT_CREATED"
    PROJECT_CONFIRMED = "PROJECT_CONFIRMED"


class ActivityEvent(BaseModel):
    """One append-only activity log entry."""

    id: str = Field(default_factory=lambda: uuid4().hex[:12])
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    user_id: str = Field(default="anonymous", alias="userId")
    action: str
    data: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True

    def to_firestore_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
