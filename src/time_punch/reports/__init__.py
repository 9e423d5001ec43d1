"""Time reports delegated to hledger."""

from time_punch.reports.engine import ReportEngine, ReportEngineError, ReportResult
from time_punch.reports.hledger import HledgerEngine

__all__ = ["HledgerEngine", "ReportEngine", "ReportEngineError", "ReportResult"]
