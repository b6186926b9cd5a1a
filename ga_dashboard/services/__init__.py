"""Dashboard services"""

from ga_dashboard.services.dashboard_service import DashboardService
from ga_dashboard.services.partner_report_service import PartnerReportService
from ga_dashboard.services.property_stats_service import PropertyStatsService
from ga_dashboard.services.report_tools import ReportToolkit

__all__ = [
    "DashboardService",
    "PartnerReportService",
    "PropertyStatsService",
    "ReportToolkit",
]
