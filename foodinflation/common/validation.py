"""Argument validation shared by the engine, the loader and the CLI.

Every helper returns the validated (possibly normalized) value so calls can
be used inline.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .exceptions import InvalidFieldError, ValidationError


# ============================================================================
# FIELD VALIDATION
# ============================================================================

def validate_field(field: str, allowed: Sequence[str]) -> str:
    """Check that ``field`` is one of ``allowed``.

    Raises:
        InvalidFieldError: If the field is unknown
    """
    if field not in allowed:
        raise InvalidFieldError(field, tuple(allowed))
    return field


def validate_fields(fields: str | Iterable[str], allowed: Sequence[str]) -> tuple[str, ...]:
    """Normalize one field name or a sequence of them into a validated tuple."""
    if isinstance(fields, str):
        fields = (fields,)
    result = tuple(validate_field(f, allowed) for f in fields)
    if not result:
        raise ValidationError("At least one field is required")
    return result


# ============================================================================
# NUMERIC VALIDATION
# ============================================================================

def validate_positive(value: int, name: str = "value") -> int:
    """Check that a number is strictly positive."""
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got: {value}")
    return value


def validate_range(
    value: int | float,
    min_val: Optional[int | float] = None,
    max_val: Optional[int | float] = None,
    name: str = "value"
) -> int | float:
    """Check that a number lies within an inclusive range.

    Args:
        value: Number to check
        min_val: Inclusive lower bound, None for no bound
        max_val: Inclusive upper bound, None for no bound
        name: Parameter name used in the error message

    Raises:
        ValidationError: If out of range
    """
    if min_val is not None and value < min_val:
        raise ValidationError(f"{name} must be >= {min_val}, got: {value}")

    if max_val is not None and value > max_val:
        raise ValidationError(f"{name} must be <= {max_val}, got: {value}")

    return value


def validate_month(month: int) -> int:
    return int(validate_range(month, 1, 12, name="month"))


# ============================================================================
# CHOICE VALIDATION
# ============================================================================

def validate_choice(value: str, choices: Iterable[str], name: str = "value") -> str:
    choices = tuple(choices)
    if value not in choices:
        raise ValidationError(
            f"{name} must be one of {', '.join(choices)}, got: {value}",
            {name: value},
        )
    return value


def validate_direction(direction: str) -> bool:
    """Turn ``"asc"``/``"desc"`` into a ``descending`` flag."""
    normalized = validate_choice(str(direction).lower(), ("asc", "desc"), "direction")
    return normalized == "desc"
