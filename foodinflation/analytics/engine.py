"""Analytics engine over an in-memory snapshot of inflation records.

The engine owns an immutable tuple of ``InflationRecord`` and exposes the
grouping, ranking and trend operations the reports are built from. Every
operation is a pure function of that snapshot.

Conventions shared by all operations:

- means and standard deviations are ``Decimal`` values rounded half away
  from zero to ``config.ROUND_PLACES`` places;
- ``None`` values are ignored by aggregates, and a group whose values are
  all ``None`` aggregates to ``None``;
- grouped mappings are keyed by tuples of group-key values, even for a
  single key, and iterate in ascending key order with ``None`` last.
"""

from __future__ import annotations

import logging
import operator
import statistics
from decimal import Decimal
from typing import Any, Callable, Hashable, Iterable, Iterator, Optional, Sequence

from ..common.exceptions import EmptyInputError, InsufficientHistoryError
from ..common.formatting import round_decimal
from ..common.validation import (
    validate_choice,
    validate_direction,
    validate_field,
    validate_fields,
    validate_month,
    validate_positive,
    validate_range,
)
from ..config import RUN_LENGTH
from ..core.models import FIELDS, NUMERIC_FIELDS, InflationRecord, SummaryStatistics
from ..logging_cfg import get_logger, log_call
from . import window

logger = get_logger(__name__)

Keys = str | Sequence[str]


def quarter_of(month: int) -> int:
    """Calendar quarter of a month number: ``ceil(month / 3)``."""
    return (validate_month(month) + 2) // 3


# Group keys computed from a record rather than stored on it
DERIVED_KEYS: dict[str, Callable[[InflationRecord], Any]] = {
    "quarter": lambda r: None if r.month is None else quarter_of(r.month),
}

GROUP_KEYS: tuple[str, ...] = FIELDS + tuple(DERIVED_KEYS)

# Fields that can be aggregated numerically
AGGREGATE_FIELDS: tuple[str, ...] = NUMERIC_FIELDS + ("year", "month")

COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _mean(values: list[Decimal]) -> Optional[Decimal]:
    if not values:
        return None
    return round_decimal(statistics.mean(values))


def _stddev(values: list[Decimal], sample: bool = True) -> Optional[Decimal]:
    """Sample (SQL STDDEV) or population standard deviation.

    A sample deviation needs two values; one value gives ``None`` like SQL.
    """
    if sample:
        if len(values) < 2:
            return None
        return round_decimal(statistics.stdev(values))
    if not values:
        return None
    return round_decimal(statistics.pstdev(values))


class AnalyticsEngine:
    """Read-only reporting operations over a snapshot of records."""

    def __init__(self, records: Iterable[InflationRecord]):
        self._records: tuple[InflationRecord, ...] = tuple(records)
        logger.debug("Engine snapshot holds %d records", len(self._records))

    @property
    def records(self) -> tuple[InflationRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    # ------------------------------------------------------------------
    # key helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _getter(name: str) -> Callable[[InflationRecord], Any]:
        derived = DERIVED_KEYS.get(name)
        if derived is not None:
            return derived
        return operator.attrgetter(name)

    def _key_func(self, keys: Keys, allowed: Sequence[str] = GROUP_KEYS) -> Callable[[InflationRecord], tuple]:
        getters = [self._getter(k) for k in validate_fields(keys, allowed)]
        return lambda r: tuple(g(r) for g in getters)

    def _order_func(self, keys: Keys, descending: bool = False) -> Callable[[InflationRecord], Any]:
        """Order key for one field (raw value) or several (null-safe tuple).

        ``descending`` must match the direction the key is sorted in.
        """
        names = validate_fields(keys, GROUP_KEYS)
        if len(names) == 1:
            return self._getter(names[0])
        key = self._key_func(names)
        return lambda r: window.composite_key(key(r), descending)

    def _groups(self, group_keys: Keys) -> dict[Hashable, list[InflationRecord]]:
        parts = window.partition(self._records, self._key_func(group_keys))
        return {k: parts[k] for k in sorted(parts, key=window.composite_key)}

    @staticmethod
    def _values(records: Iterable[InflationRecord], field: str) -> list[Decimal]:
        return [_as_decimal(v) for v in (r.get(field) for r in records) if v is not None]

    def _aggregate(
        self,
        group_keys: Keys,
        field: str,
        reducer: Callable[[list[Decimal]], Optional[Decimal]],
    ) -> dict[tuple, Optional[Decimal]]:
        validate_field(field, AGGREGATE_FIELDS)
        groups = self._groups(group_keys)
        return {key: reducer(self._values(rows, field)) for key, rows in groups.items()}

    # ------------------------------------------------------------------
    # data-quality and coverage
    # ------------------------------------------------------------------

    def count_all(self) -> int:
        return len(self._records)

    def distinct_countries(self) -> list[str]:
        return sorted({r.country for r in self._records if r.country is not None})

    def time_coverage(self) -> list[tuple[int, int]]:
        """Distinct (year, month) pairs, newest year first, months ascending."""
        pairs = sorted({(r.year, r.month) for r in self._records}, key=lambda p: window.null_last(p[1]))
        return window.sort_rows(pairs, key=lambda p: p[0], descending=True)

    @log_call(logging.DEBUG)
    def summary_statistics(self, field: str, sample: bool = True) -> SummaryStatistics:
        """Min, max, mean and standard deviation of the non-null values.

        Raises:
            InvalidFieldError: If ``field`` is not numeric
            EmptyInputError: If every value is null or there are no records
        """
        validate_field(field, AGGREGATE_FIELDS)
        values = self._values(self._records, field)
        if not values:
            raise EmptyInputError(field)
        return SummaryStatistics(
            field=field,
            count=len(values),
            min=round_decimal(min(values)),
            max=round_decimal(max(values)),
            mean=_mean(values),
            stddev=_stddev(values, sample),
        )

    def null_counts(self, fields: Keys = NUMERIC_FIELDS) -> dict[str, int]:
        names = validate_fields(fields, FIELDS)
        return {f: sum(1 for r in self._records if r.get(f) is None) for f in names}

    # ------------------------------------------------------------------
    # grouped aggregates
    # ------------------------------------------------------------------

    @log_call(logging.DEBUG)
    def record_counts_by(self, group_keys: Keys) -> dict[tuple, int]:
        return {key: len(rows) for key, rows in self._groups(group_keys).items()}

    @log_call(logging.DEBUG)
    def average_by(self, group_keys: Keys, field: str) -> dict[tuple, Optional[Decimal]]:
        return self._aggregate(group_keys, field, _mean)

    @log_call(logging.DEBUG)
    def volatility_by(
        self, group_keys: Keys, field: str, sample: bool = True
    ) -> dict[tuple, Optional[Decimal]]:
        return self._aggregate(group_keys, field, lambda values: _stddev(values, sample))

    @staticmethod
    def _top_n(
        aggregates: dict[tuple, Optional[Decimal]], n: int, descending: bool
    ) -> list[tuple[Any, Decimal]]:
        validate_positive(n, "n")
        items = [(key[0], value) for key, value in aggregates.items() if value is not None]
        # ties fall back to the group value, ascending
        if descending:
            items.sort(key=lambda kv: (-kv[1], window.null_last(kv[0])))
        else:
            items.sort(key=lambda kv: (kv[1], window.null_last(kv[0])))
        return items[:n]

    @log_call(logging.DEBUG)
    def top_n_by_average(
        self, group_key: str, field: str, n: int, descending: bool = True
    ) -> list[tuple[Any, Decimal]]:
        """The ``n`` groups with the highest (or lowest) mean of ``field``.

        Groups whose mean is ``None`` are left out.
        """
        return self._top_n(self.average_by(validate_field(group_key, GROUP_KEYS), field), n, descending)

    @log_call(logging.DEBUG)
    def top_n_by_volatility(
        self, group_key: str, field: str, n: int, descending: bool = True, sample: bool = True
    ) -> list[tuple[Any, Decimal]]:
        return self._top_n(
            self.volatility_by(validate_field(group_key, GROUP_KEYS), field, sample), n, descending
        )

    # ------------------------------------------------------------------
    # filtering
    # ------------------------------------------------------------------

    def filter_threshold(
        self,
        field: str,
        comparator: str,
        value: Any,
        order_by: Optional[Keys] = None,
        descending: bool = False,
    ) -> Iterator[InflationRecord]:
        """Lazily yield records where ``field <comparator> value``.

        Null values never match. Source order is kept unless ``order_by``
        is given. Arguments are checked immediately, before iteration.
        """
        validate_field(field, FIELDS)
        compare = COMPARATORS[validate_choice(comparator, COMPARATORS, "comparator")]
        order = self._order_func(order_by, descending) if order_by is not None else None

        def _matches() -> Iterator[InflationRecord]:
            for record in self._records:
                current = record.get(field)
                if current is not None and compare(current, value):
                    yield record

        if order is None:
            return _matches()
        return iter(window.sort_rows(list(_matches()), order, descending))

    def where(self, field: str, *values: Any) -> "AnalyticsEngine":
        """New engine over the records whose ``field`` is one of ``values``."""
        validate_field(field, FIELDS)
        wanted = set(values)
        return AnalyticsEngine(r for r in self._records if r.get(field) in wanted)

    # ------------------------------------------------------------------
    # window operations
    # ------------------------------------------------------------------

    @log_call(logging.DEBUG)
    def rank_within_partition(
        self, partition_key: Keys, order_key: Keys, direction: str = "desc"
    ) -> list[int]:
        """Competition rank of every record inside its partition.

        Ranks are returned aligned with the snapshot order. Tied values share
        a rank and the next distinct value skips ahead (1, 1, 3).
        """
        part = self._key_func(partition_key)
        descending = validate_direction(direction)
        order = self._order_func(order_key, descending)

        ranks = [0] * len(self._records)
        positions = window.partition(range(len(self._records)), lambda i: part(self._records[i]))
        for indices in positions.values():
            rows = [self._records[i] for i in indices]
            for index, rank in zip(indices, window.competition_rank(rows, order, descending)):
                ranks[index] = rank
        return ranks

    @log_call(logging.DEBUG)
    def consecutive_increase_runs(
        self,
        partition_key: Keys,
        order_key: Keys,
        value_key: str,
        run_length: int = RUN_LENGTH,
    ) -> list[InflationRecord]:
        """Records ending a strictly increasing run of ``run_length`` values.

        Each partition is ordered by ``order_key``; a record qualifies when
        it and its ``run_length - 1`` predecessors are strictly increasing.
        Records without enough predecessors, or with a null anywhere in the
        window, are skipped. Output is ordered by partition then order key.
        """
        validate_range(run_length, 2, name="run_length")
        validate_field(value_key, FIELDS)
        order = self._order_func(order_key)
        value_of = operator.attrgetter(value_key)

        flagged: list[InflationRecord] = []
        for rows in self._groups(partition_key).values():
            ordered = window.sort_rows(rows, order)
            values = [value_of(r) for r in ordered]
            for index, record in enumerate(ordered):
                try:
                    run = [window.lag(values, index, offset) for offset in range(run_length - 1, 0, -1)]
                except InsufficientHistoryError:
                    continue
                run.append(values[index])
                if any(v is None for v in run):
                    continue
                if all(a < b for a, b in zip(run, run[1:])):
                    flagged.append(record)
        return flagged

    @log_call(logging.DEBUG)
    def highest_per_partition(self, partition_key: Keys, value_key: str) -> list[InflationRecord]:
        """One record per partition: the one with the largest ``value_key``.

        Single pass over the snapshot with a best-seen map. A record only
        replaces the current best when strictly greater, so on ties the
        record that comes first in snapshot order wins, every time. Null
        values never win; a partition with only nulls yields its first
        record. Output is ordered by partition key.
        """
        part = self._key_func(partition_key)
        validate_field(value_key, FIELDS)

        best: dict[Hashable, InflationRecord] = {}
        for record in self._records:
            key = part(record)
            if key not in best:
                best[key] = record
                continue
            value = record.get(value_key)
            current = best[key].get(value_key)
            if value is not None and (current is None or value > current):
                best[key] = record
        return [best[k] for k in sorted(best, key=window.composite_key)]

    quarter_of = staticmethod(quarter_of)


__all__ = [
    "AGGREGATE_FIELDS",
    "AnalyticsEngine",
    "COMPARATORS",
    "DERIVED_KEYS",
    "GROUP_KEYS",
    "quarter_of",
]
