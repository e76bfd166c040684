"""Configuration and constants for the foodinflation package."""
from __future__ import annotations

from typing import Dict, Tuple

# Default dataset looked up by the CLI when --data is not given
DEFAULT_DATA_FILE = "food_inflation.csv"

# Default settings file read by ConfigManager
DEFAULT_SETTINGS_FILE = "settings.json"

# Table name used when loading from SQLite
DEFAULT_TABLE = "food_inflation"

# Decimal places used for every mean and standard deviation
ROUND_PLACES = 2

# Report parameters
DEFAULT_TOP_N = 5
SPIKE_THRESHOLD = 5
DEFLATION_THRESHOLD = 0
RUN_LENGTH = 3
FOCUS_COUNTRY = "Nigeria"
COMPARE_COUNTRIES: Tuple[str, ...] = ("Nigeria", "Kenya")

# Date format of the CSV `date` column
DATE_FMT = "%Y-%m-%d"

MONTH_NAMES: Tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Case-folded month name -> month number. Explicit table, no locale parsing.
MONTH_NUMBERS: Dict[str, int] = {
    name.lower(): number for number, name in enumerate(MONTH_NAMES, start=1)
}
