"""Window helpers: partitioning, ordering, ranking and lag lookups.

These are the sort-and-scan building blocks behind the engine's ranking and
trend operations. They work on any row type; callers pass key functions.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Sequence, TypeVar

from ..common.exceptions import InsufficientHistoryError

T = TypeVar("T")

KeyFunc = Callable[[T], Any]


def null_last(value: Any) -> tuple:
    """Sort key that orders ``None`` after every real value."""
    if value is None:
        return (1,)
    return (0, value)


def composite_key(values: Sequence[Any], descending: bool = False) -> tuple:
    """Tuple key with ``None`` components last in the requested direction.

    For a descending sort (``reverse=True``) the null marker is flipped so
    that ``None`` still ends up after real values.
    """
    if not descending:
        return tuple(null_last(v) for v in values)
    return tuple((0,) if v is None else (1, v) for v in values)


def partition(rows: Sequence[T], key: Callable[[T], Hashable]) -> dict[Hashable, list[T]]:
    """Group rows by ``key`` keeping source order inside each partition."""
    parts: dict[Hashable, list[T]] = {}
    for row in rows:
        parts.setdefault(key(row), []).append(row)
    return parts


def sort_rows(rows: Sequence[T], key: KeyFunc, descending: bool = False) -> list[T]:
    """Stable sort with ``None`` keys last in either direction."""
    present = [r for r in rows if key(r) is not None]
    missing = [r for r in rows if key(r) is None]
    # reverse=True keeps equal keys in source order
    present.sort(key=key, reverse=descending)
    return present + missing


def competition_rank(rows: Sequence[T], key: KeyFunc, descending: bool = True) -> list[int]:
    """Rank rows by ``key`` with RANK semantics (1, 1, 3).

    Returns ranks aligned with the input order. Rows whose key is ``None``
    rank after all others and tie among themselves.
    """
    order = sort_rows(range(len(rows)), lambda i: key(rows[i]), descending)
    ranks = [0] * len(rows)
    previous: Any = object()
    current_rank = 0
    for position, index in enumerate(order, start=1):
        value = key(rows[index])
        if position == 1 or value != previous:
            current_rank = position
            previous = value
        ranks[index] = current_rank
    return ranks


def lag(values: Sequence[T], index: int, offset: int = 1) -> T:
    """Return the value ``offset`` positions before ``index``.

    Raises:
        InsufficientHistoryError: If fewer than ``offset`` values precede it
    """
    if index - offset < 0:
        raise InsufficientHistoryError(index, offset)
    return values[index - offset]
