"""
Analytics schemas.
"""

from typing import Dict, Optional

from complaint_portal.schemas.common.base import BaseSchema


class AnalyticsSummary(BaseSchema):
    category: Optional[str] = None
    total: int
    by_status: Dict[str, int]
    completed_by_date: Dict[str, int]
    by_category: Dict[str, int]


class DashboardStats(BaseSchema):
    category: Optional[str] = None
    total: int
    new_today: int
    completed_last24h: int
    updated_last24h: int
    average_response_hours: float
    efficiency: int
    status_counts: Dict[str, int]
