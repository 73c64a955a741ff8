from complaint_portal.services.analytics.analytics_service import (
    AnalyticsService,
    dashboard_stats,
    status_counts,
    summarize,
)
from complaint_portal.services.analytics.export_service import ComplaintExportService, ExportFormat

__all__ = [
    "AnalyticsService",
    "ComplaintExportService",
    "ExportFormat",
    "dashboard_stats",
    "status_counts",
    "summarize",
]
