"""Numeric coercion and rounding helpers.

Form data arrives as an untyped bag (strings from inputs, booleans from
checkboxes, missing keys during incremental filling). These helpers coerce
without raising.
"""

import math
from typing import Any, List


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a form value to float; missing or invalid input becomes `default`."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
        return number if math.isfinite(number) else default
    return default


def is_truthy(value: Any) -> bool:
    """Checkbox semantics: "false", "0", "" and empty collections are off."""
    if isinstance(value, str):
        return value.strip().lower() not in {"", "false", "0", "off", "no"}
    return bool(value)


def as_list(value: Any) -> List[Any]:
    """Normalize a checkbox-group value to a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str):
        return [value] if value else []
    return [value]


def round_half_up(value: float) -> int:
    """Round to the nearest integer currency unit; .5 always rounds up."""
    return int(math.floor(value + 0.5))


def round_hours(value: float) -> float:
    """Round labor hours to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10
