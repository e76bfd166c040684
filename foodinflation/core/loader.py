"""Load ``InflationRecord`` snapshots from CSV files or SQLite tables.

The loader only checks that each row matches the schema. It does not check
that date, year, month and month_name agree with each other.
"""

from __future__ import annotations

import csv
import re
import sqlite3
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..common.exceptions import DataLoadError
from ..config import DATE_FMT, DEFAULT_TABLE
from ..logging_cfg import get_logger
from .models import FIELDS, InflationRecord

logger = get_logger(__name__)

SQLITE_SUFFIXES = {".db", ".sqlite", ".sqlite3"}

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _parse_decimal(raw: Any) -> Optional[Decimal]:
    if raw is None:
        return None
    if isinstance(raw, Decimal):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    return Decimal(text)


def _parse_text(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    return str(raw).strip()


def _parse_date(raw: Any):
    if hasattr(raw, "year") and hasattr(raw, "month"):
        return raw
    text = str(raw).strip()
    # SQLite TIMESTAMP-like strings carry a time part
    return datetime.strptime(text[:10], DATE_FMT).date()


def record_from_row(row: Mapping[str, Any]) -> InflationRecord:
    """Build a record from a column -> value mapping.

    Raises:
        ValueError, InvalidOperation, KeyError: On malformed values
    """
    return InflationRecord(
        date=_parse_date(row["date"]),
        year=int(row["year"]),
        month=int(row["month"]),
        month_name=_parse_text(row["month_name"]),
        country=_parse_text(row["country"]),
        iso3=_parse_text(row["iso3"]),
        inflation=_parse_decimal(row["inflation"]),
        inflation_change=_parse_decimal(row["inflation_change"]),
    )


def _build(rows: Iterable[Mapping[str, Any]], source: str, first_line: int) -> list[InflationRecord]:
    records: list[InflationRecord] = []
    for line, row in enumerate(rows, start=first_line):
        try:
            records.append(record_from_row(row))
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            raise DataLoadError(source, f"invalid row: {e}", line) from e
    return records


def _check_columns(columns: Iterable[str], source: str) -> None:
    missing = [f for f in FIELDS if f not in set(columns)]
    if missing:
        raise DataLoadError(source, f"missing columns: {', '.join(missing)}")


def load_csv(path: Path | str) -> list[InflationRecord]:
    """Read every row of a CSV file with a header row."""
    path = Path(path)
    if not path.is_file():
        raise DataLoadError(str(path), "file not found")

    try:
        with open(path, "r", newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            _check_columns(reader.fieldnames or [], str(path))
            # line 1 is the header
            records = _build(reader, str(path), first_line=2)
    except OSError as e:
        raise DataLoadError(str(path), str(e)) from e

    logger.info("Loaded %d records from %s", len(records), path)
    return records


def load_sqlite(db_path: Path | str, table: str = DEFAULT_TABLE) -> list[InflationRecord]:
    """Read every row of ``table`` in rowid order."""
    db_path = Path(db_path)
    if not db_path.is_file():
        raise DataLoadError(str(db_path), "file not found")
    if not _IDENTIFIER.match(table):
        raise DataLoadError(str(db_path), f"invalid table name {table!r}")

    try:
        with sqlite3.connect(db_path) as conn:
            conn.row_factory = sqlite3.Row
            cursor = conn.execute(f"SELECT * FROM {table} ORDER BY rowid")
            _check_columns([d[0] for d in cursor.description], str(db_path))
            records = _build(cursor, str(db_path), first_line=1)
    except sqlite3.Error as e:
        raise DataLoadError(str(db_path), str(e)) from e

    logger.info("Loaded %d records from %s:%s", len(records), db_path, table)
    return records


def load_records(path: Path | str, table: str = DEFAULT_TABLE) -> list[InflationRecord]:
    """Pick the SQLite or CSV reader from the file suffix."""
    path = Path(path)
    if path.suffix.lower() in SQLITE_SUFFIXES:
        return load_sqlite(path, table)
    return load_csv(path)
