import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from foodinflation.analytics import AnalyticsEngine
from foodinflation.common.exceptions import DataLoadError
from foodinflation.core.loader import load_csv, load_records, load_sqlite

HEADER = "date,year,month,month_name,country,iso3,inflation,inflation_change\n"

SCHEMA = """
CREATE TABLE food_inflation (
    date               DATE,
    year               INT,
    month              INT,
    month_name         VARCHAR(15),
    country            VARCHAR(50),
    iso3               CHAR(3),
    inflation          NUMERIC(10, 2),
    inflation_change   NUMERIC(10, 2)
)
"""


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "food_inflation.csv"
    path.write_text(
        HEADER
        + "2023-01-01,2023,1,January,Nigeria,NGA,24.32,1.25\n"
        + "2023-02-01,2023,2,February,Nigeria,NGA,,\n"
        + "2023-01-01,2023,1,January,Kenya,KEN,7.10,-0.40\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def sqlite_file(tmp_path):
    path = tmp_path / "food_inflation.db"
    with sqlite3.connect(path) as conn:
        conn.execute(SCHEMA)
        conn.executemany(
            "INSERT INTO food_inflation VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                ("2022-12-01", 2022, 12, "December", "Ghana", "GHA", 59.7, None),
                ("2023-01-01", 2023, 1, "January", "Ghana", "GHA", 61, 1.3),
            ],
        )
    return path


def test_load_csv(csv_file):
    records = load_csv(csv_file)
    assert len(records) == 3
    first = records[0]
    assert first.date == date(2023, 1, 1)
    assert first.country == "Nigeria"
    assert first.iso3 == "NGA"
    assert first.inflation == Decimal("24.32")
    assert first.inflation_change == Decimal("1.25")


def test_load_csv_empty_cells_are_null(csv_file):
    records = load_csv(csv_file)
    assert records[1].inflation is None
    assert records[1].inflation_change is None


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(DataLoadError, match="file not found"):
        load_csv(tmp_path / "nope.csv")


def test_load_csv_missing_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("date,year,country\n2023-01-01,2023,Kenya\n", encoding="utf-8")
    with pytest.raises(DataLoadError) as exc:
        load_csv(path)
    assert "month_name" in str(exc.value)


def test_load_csv_bad_value_reports_line(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        HEADER
        + "2023-01-01,2023,1,January,Kenya,KEN,7.10,0\n"
        + "2023-02-01,2023,2,February,Kenya,KEN,high,0\n",
        encoding="utf-8",
    )
    with pytest.raises(DataLoadError) as exc:
        load_csv(path)
    assert exc.value.line == 3
    assert isinstance(exc.value.__cause__, Exception)


def test_load_sqlite(sqlite_file):
    records = load_sqlite(sqlite_file)
    assert [r.month for r in records] == [12, 1]
    assert records[0].inflation == Decimal("59.7")
    assert records[0].inflation_change is None
    assert records[1].inflation == Decimal("61")


def test_load_sqlite_missing_table(sqlite_file):
    with pytest.raises(DataLoadError):
        load_sqlite(sqlite_file, table="other_table")


def test_load_sqlite_rejects_odd_table_name(sqlite_file):
    with pytest.raises(DataLoadError, match="invalid table name"):
        load_sqlite(sqlite_file, table="x; DROP TABLE food_inflation")


def test_load_records_dispatches_on_suffix(csv_file, sqlite_file):
    assert len(load_records(csv_file)) == 3
    assert len(load_records(sqlite_file)) == 2


def test_load_sqlite_null_text_columns_stay_null(tmp_path):
    path = tmp_path / "nulls.db"
    with sqlite3.connect(path) as conn:
        conn.execute(SCHEMA)
        conn.execute(
            "INSERT INTO food_inflation VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            ("2023-01-01", 2023, 1, None, None, None, 12.5, None),
        )
    records = load_sqlite(path)
    assert records[0].country is None
    assert records[0].iso3 is None
    assert records[0].month_name is None
    assert AnalyticsEngine(records).distinct_countries() == []
