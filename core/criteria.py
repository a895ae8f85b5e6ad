"""Validation of incoming search criteria."""

import math
from typing import Any, Dict, List, Tuple

REQUIRED_FIELDS = ("city", "state", "ages", "availability", "distance")

MIN_DISTANCE = 1
MAX_DISTANCE = 50

_FIELD_LABELS = {
    "city": "City",
    "state": "State",
    "ages": "Children's ages",
    "availability": "Availability",
}


def _has_text(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return any(str(item).strip() for item in value)
    return isinstance(value, str) and bool(value.strip())


def missing_fields(criteria: Dict[str, Any]) -> List[str]:
    """Required fields that are absent or blank."""
    missing = [name for name in _FIELD_LABELS if not _has_text(criteria.get(name))]
    distance = criteria.get("distance")
    if distance is None or (isinstance(distance, str) and not distance.strip()):
        missing.append("distance")
    return missing


def validate_search_criteria(criteria: Dict[str, Any]) -> Tuple[List[str], List[str]]:
    """
    Check search criteria before any prompt is built.

    Returns:
        Tuple of (missing field names, human-readable errors); both empty when valid
    """
    missing = missing_fields(criteria)
    errors = [f"{_FIELD_LABELS.get(name, name.capitalize())} is required" for name in missing]

    if "distance" not in missing:
        distance = criteria.get("distance")
        try:
            if isinstance(distance, bool):
                raise TypeError(distance)
            value = float(distance)
        except (TypeError, ValueError):
            errors.append("Distance must be a valid number")
        else:
            if math.isnan(value) or not MIN_DISTANCE <= value <= MAX_DISTANCE:
                errors.append(f"Distance must be between {MIN_DISTANCE} and {MAX_DISTANCE} miles")

    return missing, errors
