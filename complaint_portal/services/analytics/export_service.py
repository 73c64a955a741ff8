"""
Analytics export: CSV rows, a PDF summary report, or JSON.
"""

import csv
import io
import json
from enum import Enum
from typing import Any, Dict, List, Optional

from complaint_portal.core.logging import get_logger, log_execution_time
from complaint_portal.models.complaint import Complaint
from complaint_portal.models.user import User
from complaint_portal.services.analytics.analytics_service import AnalyticsService, summarize
from complaint_portal.services.base import ServiceResult
from complaint_portal.utils.datetime_utils import DateTimeHelper
from complaint_portal.utils.pdf_utils import PDFGenerator

logger = get_logger(__name__)

REPORT_TITLE = "Supervisor Dashboard Analytics"
CSV_COLUMNS = ["id", "status", "category", "createdAt"]


class ExportFormat(str, Enum):
    """Export file formats."""
    CSV = "csv"
    PDF = "pdf"
    JSON = "json"


_MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.PDF: "application/pdf",
    ExportFormat.JSON: "application/json",
}


def _row(complaint: Complaint) -> Dict[str, Any]:
    created = DateTimeHelper.as_utc(complaint.created_at)
    return {
        "id": complaint.id,
        "status": complaint.status.value,
        "category": complaint.category.value,
        "createdAt": created.isoformat() if created else "",
    }


class ComplaintExportService:
    """
    Complaint export service.

    Exports cover the same scope as the analytics screen of the caller.
    """

    def __init__(self, analytics_service: AnalyticsService):
        self.analytics_service = analytics_service
        self.pdf_generator = PDFGenerator()

    @log_execution_time()
    def export(
        self,
        user: User,
        format: ExportFormat,
        category: Optional[str] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Returns:
            ServiceResult with ``filename``, ``media_type``, ``content`` and ``count``
        """
        loaded = self.analytics_service.scoped_complaints(user, category)
        if not loaded:
            return loaded
        complaints, label = loaded.data

        if format == ExportFormat.CSV:
            content: bytes = self._export_to_csv(complaints)
        elif format == ExportFormat.PDF:
            content = self._export_to_pdf(complaints, label)
        else:
            content = self._export_to_json(complaints, label)

        stamp = DateTimeHelper.now().strftime("%Y%m%d_%H%M%S")
        logger.info(
            f"Exported {len(complaints)} complaints as {format.value}",
            extra={"user_id": user.id, "export_format": format.value},
        )
        return ServiceResult.success({
            "filename": f"complaint_analytics_{stamp}.{format.value}",
            "media_type": _MEDIA_TYPES[format],
            "content": content,
            "count": len(complaints),
        })

    @staticmethod
    def _export_to_csv(complaints: List[Complaint]) -> bytes:
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for complaint in complaints:
            writer.writerow(_row(complaint))
        data = output.getvalue()
        output.close()
        return data.encode("utf-8")

    @staticmethod
    def _export_to_json(complaints: List[Complaint], label: Optional[str]) -> bytes:
        payload = {
            "category": label,
            "summary": summarize(complaints),
            "complaints": [_row(complaint) for complaint in complaints],
        }
        return json.dumps(payload, indent=2).encode("utf-8")

    def _export_to_pdf(self, complaints: List[Complaint], label: Optional[str]) -> bytes:
        summary = summarize(complaints)
        header_info = {
            "Category": label or "All",
            "Total complaints": str(summary["total"]),
            "Generated": DateTimeHelper.now().strftime("%Y-%m-%d %H:%M UTC"),
        }
        content = [
            {"type": "heading", "text": "Complaints by Status"},
            {
                "type": "table",
                "headers": ["Status", "Count"],
                "data": [[status, count] for status, count in summary["by_status"].items()],
            },
            {"type": "heading", "text": "Completed by Date"},
            {
                "type": "table",
                "headers": ["Date", "Completed"],
                "data": [[day, count] for day, count in summary["completed_by_date"].items()],
            },
            {"type": "heading", "text": "Complaints by Category"},
            {
                "type": "table",
                "headers": ["Category", "Count"],
                "data": [[category, count] for category, count in summary["by_category"].items()],
            },
        ]
        return self.pdf_generator.generate_report(REPORT_TITLE, content, header_info)
