"""Form data validation against a template's field specs.

Input errors (missing required value, out-of-range number, unknown option)
are caught here, before the calculator runs. The calculator stays tolerant
of partial data regardless, since it also runs while a form is being filled.

The cleaned data returned on success is typed: numbers are floats,
checkboxes are bools, checkbox groups are lists, and fields hidden by an
unchecked `dependsOn` parent are dropped.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog

from config.errors import ErrorCode, ValidationError
from models.template import FieldSpec, FieldType, Template
from utils.numbers import as_list, is_truthy

logger = structlog.get_logger(__name__)

_MISSING = object()


@dataclass
class ValidationResult:
    """Result of form data validation."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    field_errors: Dict[str, str] = field(default_factory=dict)
    cleaned: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, field_id: str, message: str) -> None:
        self.is_valid = False
        self.errors.append(message)
        self.field_errors.setdefault(field_id, message)


def _is_blank(value: Any) -> bool:
    if value is None or value is _MISSING:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def _check_number(spec: FieldSpec, value: Any, result: ValidationResult) -> Optional[float]:
    number = _parse_number(value)
    if number is None or number != number:
        result.add_error(spec.id, f"{spec.label} must be a number")
        return None
    if spec.min is not None and number < spec.min:
        result.add_error(spec.id, f"{spec.label} must be at least {spec.min:g}")
    elif spec.max is not None and number > spec.max:
        result.add_error(spec.id, f"{spec.label} must be at most {spec.max:g}")
    return number


def _check_field(spec: FieldSpec, value: Any, result: ValidationResult) -> Any:
    """Validate one visible, non-blank value; returns its cleaned form."""
    field_type = spec.type

    if field_type in (FieldType.NUMBER.value, FieldType.RANGE.value):
        return _check_number(spec, value, result)

    if field_type in (FieldType.SELECT.value, FieldType.RADIO.value):
        if value not in spec.option_values():
            result.add_error(spec.id, f"{spec.label}: '{value}' is not a valid option")
        return value

    if field_type == FieldType.CHECKBOX_GROUP.value:
        values = as_list(value)
        allowed = spec.option_values()
        unknown = [v for v in values if v not in allowed]
        if unknown:
            result.add_error(spec.id, f"{spec.label}: invalid option(s) {', '.join(map(str, unknown))}")
        return values

    if field_type == FieldType.CHECKBOX.value:
        return is_truthy(value)

    if field_type == FieldType.FILE.value:
        files = as_list(value)
        if spec.max_files is not None and len(files) > spec.max_files:
            result.add_error(spec.id, f"You can only upload up to {spec.max_files} files")
        return files

    return value if isinstance(value, str) else str(value)


def validate_form_data(template: Template, form_data: Optional[Dict[str, Any]]) -> ValidationResult:
    """Validate form data against every field of the template.

    Args:
        template: Template whose FieldSpecs apply.
        form_data: Raw form values keyed by field id.

    Returns:
        ValidationResult with is_valid, errors, per-field errors and cleaned data.
    """
    form_data = form_data or {}
    result = ValidationResult()

    for spec in template.fields:
        if spec.depends_on and not is_truthy(form_data.get(spec.depends_on)):
            continue

        value = form_data.get(spec.id, _MISSING)
        if _is_blank(value):
            if spec.required:
                result.add_error(spec.id, f"{spec.label} is required")
            elif spec.type == FieldType.CHECKBOX.value:
                result.cleaned[spec.id] = False
            continue

        result.cleaned[spec.id] = _check_field(spec, value, result)

    unknown_keys = sorted(set(form_data) - {f.id for f in template.fields})
    if unknown_keys:
        logger.debug("form_unknown_keys_dropped", template_id=template.id, keys=unknown_keys)

    if not result.is_valid:
        logger.info("form_validation_failed", template_id=template.id, fields=list(result.field_errors))
    return result


def require_valid_form(template: Template, form_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Validate and return cleaned form data.

    Raises:
        ValidationError: If any field is invalid; `details.fields` maps field id to message.
    """
    result = validate_form_data(template, form_data)
    if not result.is_valid:
        raise ValidationError(
            message=result.errors[0] if len(result.errors) == 1 else f"{len(result.errors)} fields are invalid",
            details={"fields": result.field_errors},
            code=ErrorCode.INVALID_FIELD,
        )
    return result.cleaned
