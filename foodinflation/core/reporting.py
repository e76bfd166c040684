from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..common.formatting import format_value
from ..logging_cfg import get_logger

logger = get_logger(__name__)


def report_columns(rows: Iterable[Mapping[str, Any]]) -> list[str]:
    """Column names in first-seen order across all rows."""
    columns: list[str] = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def write_csv(rows: list[Mapping[str, Any]], output_path: Path) -> bool:
    """Export report rows to CSV with a header row."""
    logger.info("Writing %d rows to %s", len(rows), output_path)
    columns = report_columns(rows)
    try:
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(columns)
            for row in rows:
                writer.writerow([format_value(row.get(c)) for c in columns])
        return True
    except OSError as e:
        logger.error("CSV export failed for %s: %s", output_path, e)
        return False
