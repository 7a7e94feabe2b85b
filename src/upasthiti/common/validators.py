from __future__ import annotations

import math

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def clamp_percentage(numerator: int, denominator: int) -> int:
    """Whole-number percentage in [0, 100], halves rounded up.

    An empty denominator yields 0 instead of raising.
    """
    if denominator <= 0:
        return 0
    value = math.floor(numerator * 100 / denominator + 0.5)
    return max(0, min(100, value))
