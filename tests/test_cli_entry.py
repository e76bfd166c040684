"""CLI smoke tests.

Run the typer app in-process against a small CSV file and check that the
commands print what they should and exit with the right status.
"""

import json

import pytest
from typer.testing import CliRunner

from foodinflation.cli import app

HEADER = "date,year,month,month_name,country,iso3,inflation,inflation_change\n"

runner = CliRunner()


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "food_inflation.csv"
    rows = [
        "2023-01-01,2023,1,January,Nigeria,NGA,20,1",
        "2023-02-01,2023,2,February,Nigeria,NGA,22,6",
        "2023-03-01,2023,3,March,Nigeria,NGA,25,3",
        "2023-01-01,2023,1,January,Kenya,KEN,5,-1",
        "2023-02-01,2023,2,February,Kenya,KEN,5,0",
        "2023-03-01,2023,3,March,Kenya,KEN,5,0",
    ]
    path.write_text(HEADER + "\n".join(rows) + "\n", encoding="utf-8")
    return path


def _invoke(tmp_path, *args):
    return runner.invoke(app, ["--config", str(tmp_path / "settings.json"), "--log-format", "human", *args])


def test_help_smoke():
    res = runner.invoke(app, ["--help"])
    assert res.exit_code == 0
    for command in ("overview", "list", "report", "export", "config"):
        assert command in res.stdout


def test_list_reports(tmp_path):
    res = _invoke(tmp_path, "list")
    assert res.exit_code == 0
    assert "top-countries" in res.stdout
    assert "sustained-increases" in res.stdout


def test_overview(tmp_path, data_file):
    res = _invoke(tmp_path, "overview", "--data", str(data_file))
    assert res.exit_code == 0
    assert "6" in res.stdout
    assert "13.67" in res.stdout


def test_report_top_countries(tmp_path, data_file):
    res = _invoke(tmp_path, "report", "top-countries", "--data", str(data_file), "--top", "1")
    assert res.exit_code == 0
    assert "Nigeria" in res.stdout
    assert "22.33" in res.stdout
    assert "Kenya" not in res.stdout


def test_report_country_option(tmp_path, data_file):
    res = _invoke(tmp_path, "report", "country-profile", "--data", str(data_file), "-c", "Kenya")
    assert res.exit_code == 0
    assert "January" in res.stdout
    assert "5.00" in res.stdout


def test_unknown_report_exits_1(tmp_path, data_file):
    res = _invoke(tmp_path, "report", "gdp", "--data", str(data_file))
    assert res.exit_code == 1
    assert "Report not found" in res.stdout


def test_missing_data_file_exits_1(tmp_path):
    res = _invoke(tmp_path, "report", "countries", "--data", str(tmp_path / "nope.csv"))
    assert res.exit_code == 1
    assert "file not found" in res.stdout


def test_export_csv(tmp_path, data_file):
    out = tmp_path / "spikes.csv"
    res = _invoke(tmp_path, "export", "spikes", "--data", str(data_file), "--out", str(out))
    assert res.exit_code == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "country,year,month,inflation_change"
    assert lines[1] == "Nigeria,2023,2,6"


def test_malformed_row_prints_cause(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(HEADER + "2023-01-01,20x3,1,January,Kenya,KEN,5,0\n", encoding="utf-8")
    res = _invoke(tmp_path, "report", "countries", "--data", str(path))
    assert res.exit_code == 1
    assert "line=2" in res.stdout
    assert "-> ValueError" in res.stdout


def test_config_set_saves_value(tmp_path):
    res = _invoke(tmp_path, "config", "top_n", "3")
    assert res.exit_code == 0
    stored = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert stored["top_n"] == 3

    res = _invoke(tmp_path, "config", "top_n")
    assert res.exit_code == 0
    assert res.stdout.strip() == "3"


def test_config_plain_text_value(tmp_path):
    res = _invoke(tmp_path, "config", "focus_country", "Ghana")
    assert res.exit_code == 0
    stored = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
    assert stored["focus_country"] == "Ghana"


def test_config_lists_settings(tmp_path):
    res = _invoke(tmp_path, "config")
    assert res.exit_code == 0
    assert "spike_threshold" in res.stdout


def test_config_unknown_setting_exits_1(tmp_path):
    res = _invoke(tmp_path, "config", "colour", "blue")
    assert res.exit_code == 1
    assert "Unknown setting: colour" in res.stdout
    assert not (tmp_path / "settings.json").exists()


def test_config_used_by_reports(tmp_path, data_file):
    assert _invoke(tmp_path, "config", "top_n", "1").exit_code == 0
    res = _invoke(tmp_path, "report", "top-countries", "--data", str(data_file))
    assert res.exit_code == 0
    assert "Nigeria" in res.stdout
    assert "Kenya" not in res.stdout
