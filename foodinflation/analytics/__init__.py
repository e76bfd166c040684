"""Analytics module - engine, window helpers and the report catalogue."""

from .engine import AnalyticsEngine, quarter_of
from .reports import REPORTS, InflationReports, ReportSpec

__all__ = ['AnalyticsEngine', 'InflationReports', 'REPORTS', 'ReportSpec', 'quarter_of']
