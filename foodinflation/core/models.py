from __future__ import annotations

from dataclasses import dataclass, fields as dc_fields
from datetime import date as Date
from decimal import Decimal
from typing import Any, Optional

from ..common.exceptions import InvalidFieldError


@dataclass(frozen=True)
class InflationRecord:
    """One country/month food-inflation observation."""
    date: Date
    year: int
    month: int
    month_name: Optional[str]
    country: Optional[str]
    iso3: Optional[str]
    inflation: Optional[Decimal] = None
    inflation_change: Optional[Decimal] = None

    def get(self, field: str) -> Any:
        if field not in FIELDS:
            raise InvalidFieldError(field, FIELDS)
        return getattr(self, field)


FIELDS: tuple[str, ...] = tuple(f.name for f in dc_fields(InflationRecord))
NUMERIC_FIELDS: tuple[str, ...] = ("inflation", "inflation_change")


@dataclass(frozen=True)
class SummaryStatistics:
    """Rounded descriptive statistics of one numeric field."""
    field: str
    count: int
    min: Decimal
    max: Decimal
    mean: Decimal
    stddev: Optional[Decimal]

    def as_dict(self) -> dict[str, Any]:
        return {
            f"min_{self.field}": self.min,
            f"max_{self.field}": self.max,
            f"avg_{self.field}": self.mean,
            f"stddev_{self.field}": self.stddev,
        }
