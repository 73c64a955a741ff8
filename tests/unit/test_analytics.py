from datetime import datetime
from types import SimpleNamespace

import pytest
from dateutil import tz

from complaint_portal.models.base.enums import ComplaintCategory, ComplaintStatus
from complaint_portal.services.analytics import dashboard_stats, status_counts, summarize

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=tz.UTC)


def _complaint(status, category, created, updated):
    return SimpleNamespace(status=status, category=category, created_at=created, updated_at=updated)


@pytest.fixture
def complaints():
    return [
        # completed this morning after 6 hours
        _complaint(
            ComplaintStatus.COMPLETED,
            ComplaintCategory.PLUMBING,
            datetime(2024, 5, 10, 2, 0),
            datetime(2024, 5, 10, 8, 0),
        ),
        _complaint(
            ComplaintStatus.PENDING,
            ComplaintCategory.ELECTRICAL,
            datetime(2024, 5, 1, 9, 0),
            datetime(2024, 5, 1, 9, 0),
        ),
        # completed after 18 hours, outside the 24h window
        _complaint(
            ComplaintStatus.COMPLETED,
            ComplaintCategory.PLUMBING,
            datetime(2024, 5, 8, 12, 0),
            datetime(2024, 5, 9, 6, 0),
        ),
        _complaint(
            ComplaintStatus.IN_PROGRESS,
            ComplaintCategory.CLEANING,
            datetime(2024, 5, 9, 20, 0),
            datetime(2024, 5, 10, 9, 0),
        ),
    ]


def test_status_counts_zero_fills(complaints):
    assert status_counts(complaints) == {
        "total": 4,
        "pending": 1,
        "in_progress": 1,
        "completed": 2,
        "reopened": 0,
    }
    assert status_counts([])["total"] == 0


def test_summarize(complaints):
    summary = summarize(complaints)
    assert summary["total"] == 4
    assert summary["by_status"]["completed"] == 2
    assert summary["completed_by_date"] == {"2024-05-08": 1, "2024-05-10": 1}
    assert summary["by_category"] == {"Cleaning": 1, "Electrical": 1, "Plumbing": 2}


def test_dashboard_stats(complaints):
    stats = dashboard_stats(complaints, NOW)
    assert stats["total"] == 4
    assert stats["new_today"] == 1
    assert stats["completed_last24h"] == 1
    assert stats["updated_last24h"] == 2
    assert stats["average_response_hours"] == 12.0
    assert stats["efficiency"] == 50


def test_dashboard_stats_empty():
    stats = dashboard_stats([], NOW)
    assert stats["efficiency"] == 0
    assert stats["average_response_hours"] == 0.0
