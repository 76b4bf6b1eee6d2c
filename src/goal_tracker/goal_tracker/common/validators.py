from __future__ import annotations

import math

from ..core.constants import PROGRESS_MAX, PROGRESS_MIN
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def to_percent(value) -> int:
    """Coerce anything progress-like to an int, non-numbers become 0."""
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return round_half_up(number)


def clamp_percent(value) -> int:
    return max(PROGRESS_MIN, min(PROGRESS_MAX, to_percent(value)))


def round_half_up(value: float) -> int:
    # round() is banker's rounding; 2.5 must become 3 here.
    if math.isinf(value):
        return PROGRESS_MAX if value > 0 else PROGRESS_MIN
    return int(math.floor(value + 0.5))


def require_percent(value, field_name: str) -> int:
    """Numeric progress input clamped into [0, 100]; non-numbers are rejected."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if math.isnan(number):
        raise ValidationError(f"{field_name} must be a number")
    return clamp_percent(number)
