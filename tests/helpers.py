from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from foodinflation.config import MONTH_NAMES
from foodinflation.core.models import InflationRecord

ISO3 = {"Nigeria": "NGA", "Kenya": "KEN", "Ghana": "GHA"}


def _dec(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def make_record(
    country: str = "Nigeria",
    year: int = 2023,
    month: int = 1,
    inflation=None,
    inflation_change=None,
) -> InflationRecord:
    return InflationRecord(
        date=date(year, month, 1),
        year=year,
        month=month,
        month_name=MONTH_NAMES[month - 1],
        country=country,
        iso3=ISO3.get(country, country[:3].upper()),
        inflation=_dec(inflation),
        inflation_change=_dec(inflation_change),
    )


def monthly_series(country: str, values: Iterable, year: int = 2023, start_month: int = 1) -> list[InflationRecord]:
    """Consecutive monthly records for one country, rolling into the next year."""
    records = []
    y, m = year, start_month
    for value in values:
        records.append(make_record(country, y, m, value))
        m += 1
        if m > 12:
            y, m = y + 1, 1
    return records
