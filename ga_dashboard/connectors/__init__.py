"""Analytics backend connectors"""

from ga_dashboard.connectors.base import OrderBy, QueryClient, ReportResult, ReportRow

__all__ = [
    "OrderBy",
    "QueryClient",
    "ReportResult",
    "ReportRow",
]
