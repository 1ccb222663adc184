"""Input checks shared by the engines. All raise :class:`ValidationError`."""

from __future__ import annotations

import math
from typing import Any

from .exceptions import ValidationError


def _as_number(field: str, value: Any) -> float:
    if value is None:
        raise ValidationError(field, "is required")
    if isinstance(value, bool):
        raise ValidationError(field, "must be a number", value)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(field, "must be a number", value) from exc
    if not math.isfinite(number):
        raise ValidationError(field, "must be finite", value)
    return number


def require_positive(field: str, value: Any) -> float:
    number = _as_number(field, value)
    if number <= 0:
        raise ValidationError(field, "must be greater than 0", value)
    return number


def require_non_negative(field: str, value: Any) -> float:
    number = _as_number(field, value)
    if number < 0:
        raise ValidationError(field, "must be 0 or greater", value)
    return number


def require_non_zero(field: str, value: Any) -> float:
    number = _as_number(field, value)
    if number == 0:
        raise ValidationError(field, "must not be 0", value)
    return number


def require_text(field: str, value: Any) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field, "is required")
    return str(value).strip()
