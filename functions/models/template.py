"""Project template models for RenoQuote.

A template is a named project type with its own form schema and its own
pricing model. Templates are declarative, immutable, and loaded once into
the registry.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class Complexity(str, Enum):
    """Relative project complexity shown to customers."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class FieldType(str, Enum):
    """Input widget type of a form field."""

    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    CHECKBOX_GROUP = "checkbox-group"
    RADIO = "radio"
    TEXTAREA = "textarea"
    RANGE = "range"
    FILE = "file"
    TEXT = "text"


# Field types whose value is chosen from a fixed option list
OPTION_FIELD_TYPES = {FieldType.SELECT, FieldType.RADIO, FieldType.CHECKBOX_GROUP}


class FieldOption(BaseModel):
    """One selectable option of a select/radio/checkbox-group field."""

    value: str
    label: str

    class Config:
        frozen = True


class FieldSpec(BaseModel):
    """Declarative description of one form input."""

    id: str = Field(description="Field id, unique within the template")
    label: str
    type: FieldType
    required: bool = False

    # number / range constraints
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    unit: Optional[str] = None

    # select / radio / checkbox-group
    options: List[FieldOption] = Field(default_factory=list)

    # file uploads
    max_files: Optional[int] = Field(default=None, alias="maxFiles")
    accept: Optional[str] = None
    multiple: bool = False

    depends_on: Optional[str] = Field(
        default=None,
        alias="dependsOn",
        description="Field id whose truthy value gates this field's visibility"
    )
    description: Optional[str] = None
    placeholder: Optional[str] = None

    class Config:
        populate_by_name = True
        use_enum_values = True
        frozen = True

    @model_validator(mode="after")
    def validate_constraints(self) -> "FieldSpec":
        """Option fields need options; numeric bounds must be ordered."""
        if self.type in {t.value for t in OPTION_FIELD_TYPES} and not self.options:
            raise ValueError(f"Field '{self.id}' of type {self.type} has no options")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"Field '{self.id}' has min > max")
        return self

    def option_values(self) -> List[str]:
        """Return the option values in declaration order."""
        return [option.value for option in self.options]


class Template(BaseModel):
    """A project template: identity, form schema and pricing model.

    `pricing` has no shared schema; each template carries the
    lookup tables and constants its own calculation handler reads.
    `priced_fields` maps a field id to the pricing table (dot path) that must
    hold a key for every option of that field.
    """

    id: str
    title: str
    description: str
    category: str
    complexity: Complexity
    icon: str
    estimated_time: str = Field(alias="estimatedTime")
    fields: List[FieldSpec]
    pricing: Dict[str, Any]
    priced_fields: Dict[str, str] = Field(default_factory=dict, alias="pricedFields")

    class Config:
        populate_by_name = True
        use_enum_values = True
        frozen = True

    @model_validator(mode="after")
    def validate_field_ids(self) -> "Template":
        """Field ids must be unique within a template."""
        ids = [f.id for f in self.fields]
        duplicates = {i for i in ids if ids.count(i) > 1}
        if duplicates:
            raise ValueError(f"Template '{self.id}' has duplicate field ids: {sorted(duplicates)}")
        return self

    def get_field(self, field_id: str) -> Optional[FieldSpec]:
        """Look up a field by id."""
        for f in self.fields:
            if f.id == field_id:
                return f
        return None

    def pricing_table(self, path: str) -> Any:
        """Resolve a dot path (e.g. ``"materials.stain"``) inside `pricing`.

        Returns None when any segment is missing.
        """
        node: Any = self.pricing
        for segment in path.split("."):
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        return node

    def to_summary(self) -> Dict[str, Any]:
        """Listing view without fields or pricing."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "complexity": self.complexity,
            "icon": self.icon,
            "estimatedTime": self.estimated_time,
        }
