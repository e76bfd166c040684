from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from ..config import ROUND_PLACES


def round_decimal(value: Any, places: int = ROUND_PLACES) -> Decimal | None:
    """Round half away from zero, the way SQL ROUND treats numerics.

    Examples:
    - 22.333 -> Decimal('22.33')
    - 2.345 -> Decimal('2.35')
    - None -> None
    """
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_value(value: Any) -> str:
    """Render a report cell for console output.

    - None -> ''
    - Decimal('5.00') -> '5.00'
    - tuples are joined with ' / '
    """
    if value is None:
        return ""
    if isinstance(value, tuple):
        return " / ".join(format_value(v) for v in value)
    return str(value)
