"""
Routers package for Reports module
"""

from .financial import router as financial_router
from .pos import router as pos_reports_router
from .history import router as history_router

__all__ = [
    "financial_router",
    "pos_reports_router",
    "history_router"
]
