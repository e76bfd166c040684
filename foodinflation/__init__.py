"""foodinflation package root.

Descriptive analytics over monthly food-inflation observations per country.
Keep this file small so `import foodinflation` stays lightweight; the CLI
is imported on demand by its console script.
"""

from . import config
from .analytics import AnalyticsEngine, InflationReports, quarter_of
from .core.loader import load_records
from .core.models import InflationRecord, SummaryStatistics

__version__ = "1.0.0"

__all__ = [
    "AnalyticsEngine",
    "InflationRecord",
    "InflationReports",
    "SummaryStatistics",
    "config",
    "load_records",
    "quarter_of",
]
