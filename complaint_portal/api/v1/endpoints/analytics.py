"""
Analytics endpoints for supervisors, maintenance and admins.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from complaint_portal.api.results import unwrap_result
from complaint_portal.dependencies import HandlerUser, get_analytics_service, get_export_service
from complaint_portal.schemas.analytics import AnalyticsSummary, DashboardStats
from complaint_portal.services.analytics import (
    AnalyticsService,
    ComplaintExportService,
    ExportFormat,
)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/summary", response_model=AnalyticsSummary)
def summary(
    user: HandlerUser,
    category: Optional[str] = Query(None),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsSummary:
    """Status, completion-by-day and category breakdown."""
    return unwrap_result(analytics_service.summary(user, category))


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    user: HandlerUser,
    category: Optional[str] = Query(None),
    analytics_service: AnalyticsService = Depends(get_analytics_service),
) -> DashboardStats:
    return unwrap_result(analytics_service.dashboard(user, category))


@router.get("/export")
def export(
    user: HandlerUser,
    format: ExportFormat = Query(ExportFormat.CSV),
    category: Optional[str] = Query(None),
    export_service: ComplaintExportService = Depends(get_export_service),
) -> Response:
    exported = unwrap_result(export_service.export(user, format, category))
    return Response(
        content=exported["content"],
        media_type=exported["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{exported["filename"]}"'},
    )
