"""Project record models for RenoQuote.

Represents the project document persisted in /projects/{id}.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from models.contractor import Contractor
from models.estimate import Estimate
from models.quote import Quote


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    PENDING = "pending"
    CONTRACTOR_SELECTED = "contractor-selected"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class FileMetadata(BaseModel):
    """Metadata of an uploaded file; never the file content."""

    name: str
    size: int = Field(default=0, ge=0)
    field_id: str = Field(alias="fieldId")

    class Config:
        populate_by_name = True


class ProjectRecord(BaseModel):
    """A submitted project."""

    id: Optional[str] = Field(default=None, description="Document ID")
    template_id: str = Field(alias="templateId")
    form_data: Dict[str, Any] = Field(default_factory=dict, alias="formData")
    files: List[FileMetadata] = Field(default_factory=list)
    estimate: Optional[Estimate] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    status: ProjectStatus = ProjectStatus.PENDING

    selected_contractor: Optional[Contractor] = Field(default=None, alias="selectedContractor")
    final_quote: Optional[Quote] = Field(default=None, alias="finalQuote")

    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    confirmed_at: Optional[datetime] = Field(default=None, alias="confirmedAt")

    class Config:
        populate_by_name = True
        use_enum_values = True

    def to_firestore_dict(self) -> Dict[str, Any]:
        """Convert to Firestore-compatible dict with camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"id"}, mode="json")
