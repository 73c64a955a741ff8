"""
Analytics summary, dashboard numbers and exports.
"""
import csv
import io
import json

import pytest

from complaint_portal.models.base.enums import ComplaintCategory, ComplaintStatus

API = "/api/v1/analytics"


@pytest.fixture
def seeded(make_complaint, student, staff):
    make_complaint(student, category=ComplaintCategory.PLUMBING, status=ComplaintStatus.COMPLETED)
    make_complaint(student, category=ComplaintCategory.PLUMBING, status=ComplaintStatus.PENDING)
    make_complaint(staff, category=ComplaintCategory.ELECTRICAL, status=ComplaintStatus.IN_PROGRESS)


def test_supervisor_summary_is_scoped_to_category(client, auth_headers, seeded, supervisor):
    data = client.get(f"{API}/summary", params={"category": "Electrical"}, headers=auth_headers(supervisor)).json()

    assert data["category"] == "Plumbing"
    assert data["total"] == 2
    assert data["byStatus"] == {"pending": 1, "in_progress": 0, "completed": 1, "reopened": 0}
    assert data["byCategory"] == {"Plumbing": 2}
    assert sum(data["completedByDate"].values()) == 1


def test_admin_summary_all_and_by_category(client, auth_headers, seeded, admin):
    headers = auth_headers(admin)
    everything = client.get(f"{API}/summary", headers=headers).json()
    assert everything["category"] is None
    assert everything["total"] == 3

    electrical = client.get(f"{API}/summary", params={"category": "electrical"}, headers=headers).json()
    assert electrical["category"] == "Electrical"
    assert electrical["total"] == 1

    assert client.get(f"{API}/summary", params={"category": "Gardening"}, headers=headers).status_code == 422


def test_submitters_have_no_analytics(client, auth_headers, student):
    assert client.get(f"{API}/summary", headers=auth_headers(student)).status_code == 403


def test_dashboard(client, auth_headers, seeded, maintenance):
    data = client.get(f"{API}/dashboard", headers=auth_headers(maintenance)).json()

    assert data["total"] == 3
    assert data["newToday"] == 3
    assert data["updatedLast24h"] == 3
    assert data["completedLast24h"] == 1
    assert data["efficiency"] == 33
    assert data["statusCounts"]["total"] == 3


def test_export_csv(client, auth_headers, seeded, admin):
    response = client.get(f"{API}/export", params={"format": "csv"}, headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"].startswith('attachment; filename="complaint_analytics_')
    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert len(rows) == 3
    assert set(rows[0]) == {"id", "status", "category", "createdAt"}


def test_export_json_and_pdf(client, auth_headers, seeded, supervisor):
    headers = auth_headers(supervisor)

    exported = client.get(f"{API}/export", params={"format": "json"}, headers=headers)
    payload = json.loads(exported.content)
    assert payload["category"] == "Plumbing"
    assert len(payload["complaints"]) == 2
    assert payload["summary"]["total"] == 2

    pdf = client.get(f"{API}/export", params={"format": "pdf"}, headers=headers)
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")


def test_export_rejects_unknown_format(client, auth_headers, admin):
    response = client.get(f"{API}/export", params={"format": "xlsx"}, headers=auth_headers(admin))
    assert response.status_code == 422
