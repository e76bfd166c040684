"""Report catalogue: the named food-inflation reports.

Each report is one engine call (or a short chain of them) returning rows as
plain dictionaries whose keys are the report's column names. The
``REPORTS`` registry maps CLI names to report methods and to the
parameters each one accepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from ..common.exceptions import ReportNotFoundError
from ..common.formatting import round_decimal
from ..config import MONTH_NUMBERS
from ..core.config_manager import ConfigManager
from ..logging_cfg import get_logger
from . import window
from .engine import AnalyticsEngine

logger = get_logger(__name__)

Row = dict[str, Any]


@dataclass(frozen=True)
class ReportSpec:
    name: str
    description: str
    method: str
    section: str = "analysis"
    params: tuple[str, ...] = ()


REPORTS: dict[str, ReportSpec] = {
    spec.name: spec
    for spec in (
        ReportSpec("total-records", "Total number of records", "total_records", "eda"),
        ReportSpec("countries", "Unique countries represented", "countries", "eda"),
        ReportSpec("time-coverage", "Distinct years and months", "time_coverage", "eda"),
        ReportSpec("summary", "Summary statistics for inflation", "inflation_summary", "eda"),
        ReportSpec("nulls", "Missing inflation values", "missing_values", "eda"),
        ReportSpec("records-by-country-year", "Records per country and year", "records_by_country_year", "eda"),
        ReportSpec("monthly-trend", "Monthly average inflation across countries", "monthly_trend"),
        ReportSpec("top-countries", "Countries with the highest average inflation", "top_countries", params=("top_n",)),
        ReportSpec("most-volatile", "Countries with the most unstable inflation", "most_volatile_countries", params=("top_n",)),
        ReportSpec("change-by-country-year", "Average inflation change per country and year", "change_by_country_year"),
        ReportSpec("country-profile", "Monthly inflation profile of one country", "country_monthly_profile", params=("country",)),
        ReportSpec("spikes", "Months with an inflation change above the threshold", "inflation_spikes", params=("threshold",)),
        ReportSpec("highest-by-year", "Country with the highest inflation each year", "highest_by_year"),
        ReportSpec("compare", "Monthly inflation of selected countries side by side", "compare_countries", params=("countries",)),
        ReportSpec("deflation", "Months with a negative inflation change", "deflation_months", params=("threshold",)),
        ReportSpec("annual-ranking", "Countries ranked by average inflation per year", "annual_ranking"),
        ReportSpec("sustained-increases", "Consecutive monthly inflation increases", "sustained_increases", params=("run_length",)),
        ReportSpec("yearly-volatility", "Inflation volatility per country and year", "yearly_volatility"),
        ReportSpec("quarterly", "Average inflation by quarter", "quarterly_averages"),
    )
}


def get_report(name: str) -> ReportSpec:
    try:
        return REPORTS[name]
    except KeyError:
        raise ReportNotFoundError(name) from None


def _month_position(name: Optional[str]) -> tuple:
    number = MONTH_NUMBERS.get(name.strip().lower()) if name else None
    return window.null_last(number)


class InflationReports:
    """Named reports over one ``AnalyticsEngine``."""

    def __init__(self, engine: AnalyticsEngine, settings: Optional[Mapping[str, Any] | ConfigManager] = None):
        self.engine = engine
        self.settings = settings if settings is not None else ConfigManager.defaults()

    def _setting(self, value: Any, key: str) -> Any:
        return self.settings.get(key) if value is None else value

    def run(self, name: str, **params: Any) -> list[Row]:
        """Run a report by registry name, ignoring parameters it does not take."""
        spec = get_report(name)
        accepted = {k: v for k, v in params.items() if k in spec.params and v is not None}
        logger.info("Running report %s %s", name, accepted or "")
        return getattr(self, spec.method)(**accepted)

    # ------------------------------------------------------------------
    # exploratory data analysis
    # ------------------------------------------------------------------

    def total_records(self) -> list[Row]:
        return [{"total_records": self.engine.count_all()}]

    def countries(self) -> list[Row]:
        return [{"country": c} for c in self.engine.distinct_countries()]

    def time_coverage(self) -> list[Row]:
        return [{"year": y, "month": m} for y, m in self.engine.time_coverage()]

    def inflation_summary(self) -> list[Row]:
        return [self.engine.summary_statistics("inflation").as_dict()]

    def missing_values(self) -> list[Row]:
        counts = self.engine.null_counts(("inflation", "inflation_change"))
        return [{f"null_{field}": count for field, count in counts.items()}]

    def records_by_country_year(self) -> list[Row]:
        return [
            {"country": country, "year": year, "record_count": count}
            for (country, year), count in self.engine.record_counts_by(("country", "year")).items()
        ]

    # ------------------------------------------------------------------
    # trends and rankings
    # ------------------------------------------------------------------

    def monthly_trend(self) -> list[Row]:
        return [
            {"year": year, "month": month, "avg_inflation": avg}
            for (year, month), avg in self.engine.average_by(("year", "month"), "inflation").items()
        ]

    def top_countries(self, top_n: Optional[int] = None) -> list[Row]:
        n = self._setting(top_n, "top_n")
        return [
            {"country": country, "avg_inflation": avg}
            for country, avg in self.engine.top_n_by_average("country", "inflation", n)
        ]

    def most_volatile_countries(self, top_n: Optional[int] = None) -> list[Row]:
        n = self._setting(top_n, "top_n")
        return [
            {"country": country, "inflation_volatility": vol}
            for country, vol in self.engine.top_n_by_volatility("country", "inflation", n)
        ]

    def change_by_country_year(self) -> list[Row]:
        averages = self.engine.average_by(("country", "year"), "inflation_change")
        return [
            {"country": country, "year": year, "avg_inflation_change": avg}
            for (country, year), avg in averages.items()
        ]

    def country_monthly_profile(self, country: Optional[str] = None) -> list[Row]:
        """Average inflation per month name for one country, January first."""
        country = self._setting(country, "focus_country")
        averages = self.engine.where("country", country).average_by("month_name", "inflation")
        ordered = sorted(averages.items(), key=lambda kv: _month_position(kv[0][0]))
        return [{"month_name": key[0], "avg_inflation": avg} for key, avg in ordered]

    def inflation_spikes(self, threshold: Optional[float] = None) -> list[Row]:
        threshold = self._setting(threshold, "spike_threshold")
        matches = self.engine.filter_threshold(
            "inflation_change", ">", threshold, order_by="inflation_change", descending=True
        )
        return [_change_row(r) for r in matches]

    def highest_by_year(self) -> list[Row]:
        return [
            {"year": r.year, "country": r.country, "inflation": round_decimal(r.inflation)}
            for r in self.engine.highest_per_partition("year", "inflation")
        ]

    def compare_countries(self, countries: Optional[Iterable[str]] = None) -> list[Row]:
        countries = tuple(self._setting(countries, "compare_countries"))
        averages = self.engine.where("country", *countries).average_by(("year", "month", "country"), "inflation")
        return [
            {"year": year, "month": month, "country": country, "avg_inflation": avg}
            for (year, month, country), avg in averages.items()
        ]

    def deflation_months(self, threshold: Optional[float] = None) -> list[Row]:
        threshold = self._setting(threshold, "deflation_threshold")
        matches = self.engine.filter_threshold("inflation_change", "<", threshold, order_by=("year", "month"))
        return [_change_row(r) for r in matches]

    def annual_ranking(self) -> list[Row]:
        """Countries ranked by yearly average inflation, competition style."""
        rows = [
            {"year": year, "country": country, "avg_inflation": avg}
            for (year, country), avg in self.engine.average_by(("year", "country"), "inflation").items()
        ]
        ranked: list[Row] = []
        for year_rows in window.partition(rows, lambda row: row["year"]).values():
            ranks = window.competition_rank(year_rows, lambda row: row["avg_inflation"], descending=True)
            year_ranked = [dict(row, inflation_rank=rank) for row, rank in zip(year_rows, ranks)]
            ranked.extend(sorted(year_ranked, key=lambda row: row["inflation_rank"]))
        return ranked

    def sustained_increases(self, run_length: Optional[int] = None) -> list[Row]:
        run_length = self._setting(run_length, "run_length")
        records = self.engine.consecutive_increase_runs("country", ("year", "month"), "inflation", run_length)
        return [
            {"country": r.country, "year": r.year, "month": r.month, "inflation": r.inflation}
            for r in records
        ]

    def yearly_volatility(self) -> list[Row]:
        rows = [
            {"country": country, "year": year, "yearly_volatility": vol}
            for (country, year), vol in self.engine.volatility_by(("country", "year"), "inflation").items()
        ]
        return window.sort_rows(rows, lambda row: row["yearly_volatility"], descending=True)

    def quarterly_averages(self) -> list[Row]:
        averages = self.engine.average_by(("country", "year", "quarter"), "inflation")
        return [
            {"country": country, "year": year, "quarter": quarter, "avg_quarterly_inflation": avg}
            for (country, year, quarter), avg in averages.items()
        ]


def _change_row(record) -> Row:
    return {
        "country": record.country,
        "year": record.year,
        "month": record.month,
        "inflation_change": record.inflation_change,
    }
