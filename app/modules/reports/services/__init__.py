"""
Services package for Reports module
"""

from .financial import FinancialReportService
from .pos import PosReportService
from .history import ReportHistoryService

__all__ = [
    "FinancialReportService",
    "PosReportService",
    "ReportHistoryService"
]
