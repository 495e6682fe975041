"""Input validation - required arguments, cardinality rules and type coercion.

Everything here runs before any payload is decoded or any request is sent.
"""

import re
from typing import Any, List, Optional, Sequence

from .errors import ValidationError

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    """Return ``value`` trimmed, or fail if it is absent or blank."""
    if value is None or not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_count(values: Sequence[Any], minimum: int, field_name: str, noun: str) -> None:
    """Fail unless ``values`` holds at least ``minimum`` entries."""
    if len(values) < minimum:
        if minimum == 1:
            raise ValidationError(f"At least 1 {noun} is required ({field_name})")
        raise ValidationError(f"At least {minimum} {noun}s are required ({field_name})")


def require_choice(value: str, choices: Sequence[str], field_name: str) -> str:
    if value not in choices:
        raise ValidationError(f"{field_name} must be one of: {', '.join(choices)} (got '{value}')")
    return value


def require_hex_color(value: str, field_name: str) -> str:
    if not HEX_COLOR_PATTERN.match(value):
        raise ValidationError(f"{field_name} must be a hex color like #RRGGBB (got '{value}')")
    return value


def coerce_string(value: Any, field_name: str) -> Optional[str]:
    """Coerce a loosely typed argument to a trimmed string.

    Returns None for absent or blank values so callers can apply defaults.
    """
    if value is None:
        return None
    # bool first: it is also an int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    raise ValidationError(f"{field_name} must be a string")


def coerce_string_list(value: Any, field_name: str) -> List[str]:
    """Coerce an array argument; a bare string counts as a one-element list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        items = list(value)
        for index, item in enumerate(items):
            if not isinstance(item, str):
                raise ValidationError(f"{field_name}[{index + 1}] must be a string")
        return items
    raise ValidationError(f"{field_name} must be an array of strings")


def split_csv(value: str) -> List[str]:
    """Split a comma-separated list, trimming entries and dropping blanks."""
    return [item.strip() for item in value.split(",") if item.strip()]
