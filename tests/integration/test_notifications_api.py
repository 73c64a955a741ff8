"""
Notification inbox endpoints.
"""
from complaint_portal.models.base.enums import ComplaintStatus

API = "/api/v1/notifications"


def _submit(client, headers, title="Router down"):
    response = client.post(
        "/api/v1/complaints",
        data={
            "title": title,
            "building": "Library",
            "room": "L-1",
            "description": "No wifi in the reading room",
            "category": "Internet",
        },
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def test_new_complaint_reaches_admin_inbox(client, auth_headers, student, admin):
    _submit(client, auth_headers(student))
    headers = auth_headers(admin)

    items = client.get(API, headers=headers).json()
    assert len(items) == 1
    assert items[0]["message"] == 'New complaint submitted: "Router down" (Internet)'
    assert items[0]["complaintTitle"] == "Router down"
    assert items[0]["category"] == "Internet"
    assert items[0]["read"] is False

    assert client.get(f"{API}/unread-count", headers=headers).json() == {"count": 1}


def test_mark_read_and_unread_filter(client, auth_headers, student, admin):
    _submit(client, auth_headers(student), "First")
    _submit(client, auth_headers(student), "Second")
    headers = auth_headers(admin)

    first_id = client.get(API, headers=headers).json()[-1]["id"]
    response = client.post(f"{API}/{first_id}/read", headers=headers)
    assert response.status_code == 200
    assert response.json()["read"] is True

    unread = client.get(API, params={"unread_only": True}, headers=headers).json()
    assert len(unread) == 1
    assert client.get(f"{API}/unread-count", headers=headers).json() == {"count": 1}


def test_cannot_touch_other_users_notifications(client, auth_headers, student, admin, supervisor):
    _submit(client, auth_headers(student))
    admin_item = client.get(API, headers=auth_headers(admin)).json()[0]

    response = client.post(f"{API}/{admin_item['id']}/read", headers=auth_headers(supervisor))
    assert response.status_code == 404


def test_read_all_and_clear(client, auth_headers, student, admin):
    _submit(client, auth_headers(student), "One")
    _submit(client, auth_headers(student), "Two")
    headers = auth_headers(admin)

    assert client.post(f"{API}/read-all", headers=headers).json() == {"count": 2}
    assert client.get(f"{API}/unread-count", headers=headers).json() == {"count": 0}

    assert client.delete(API, headers=headers).json() == {"count": 2}
    assert client.get(API, headers=headers).json() == []


def test_status_change_notifies_submitter(client, auth_headers, make_complaint, student, maintenance):
    complaint = make_complaint(student, status=ComplaintStatus.PENDING)
    client.patch(
        f"/api/v1/complaints/{complaint.id}/status",
        json={"status": "in_progress"},
        headers=auth_headers(maintenance),
    )

    items = client.get(API, headers=auth_headers(student)).json()
    assert [n["message"] for n in items] == [
        'Your complaint "Leaking tap" status has been updated to In Progress'
    ]
    assert items[0]["updatedBy"] == maintenance.name
