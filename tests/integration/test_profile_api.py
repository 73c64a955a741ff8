"""
Profile endpoints and the room catalog lookups.
"""
from unittest.mock import patch

from complaint_portal.config.settings import settings

API = "/api/v1/profile"


def test_get_and_update_profile(client, auth_headers, student):
    headers = auth_headers(student)

    profile = client.get(API, headers=headers).json()
    assert profile["uid"] == student.id
    assert profile["dob"] == "2003-03-05"

    updated = client.patch(API, json={"name": "Renamed Student"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["name"] == "Renamed Student"
    assert updated.json()["dob"] == "2003-03-05"


def test_upload_replaces_previous_image(client, auth_headers, student):
    headers = auth_headers(student)

    first = client.post(f"{API}/image", files={"image": ("me.png", b"first", "image/png")}, headers=headers)
    assert first.status_code == 200
    first_url = first.json()["profileImage"]
    assert client.get(first_url).content == b"first"

    second = client.post(f"{API}/image", files={"image": ("me2.png", b"second", "image/png")}, headers=headers)
    second_url = second.json()["profileImage"]
    assert second_url != first_url
    assert client.get(second_url).content == b"second"
    assert client.get(first_url).status_code == 404


def test_upload_rejects_non_images(client, auth_headers, student):
    response = client.post(
        f"{API}/image",
        files={"image": ("notes.txt", b"text", "text/plain")},
        headers=auth_headers(student),
    )
    assert response.status_code == 422


def test_upload_rejects_oversized_image(client, auth_headers, student):
    with patch.object(settings, "MAX_UPLOAD_SIZE", 8):
        response = client.post(
            f"{API}/image",
            files={"image": ("big.png", b"0123456789", "image/png")},
            headers=auth_headers(student),
        )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "FILE_TOO_LARGE"
    assert client.get(API, headers=auth_headers(student)).json().get("profileImage") is None


def test_change_password(client, auth_headers, student):
    headers = auth_headers(student)
    url = f"{API}/change-password"

    wrong = client.post(url, json={"currentPassword": "nope", "newPassword": "abcdef"}, headers=headers)
    assert wrong.status_code == 401

    short = client.post(url, json={"currentPassword": "secret123", "newPassword": "abc"}, headers=headers)
    assert short.status_code == 422

    ok = client.post(url, json={"currentPassword": "secret123", "newPassword": "abcdef"}, headers=headers)
    assert ok.json() == {"success": True, "message": "Password changed successfully"}
    assert client.post("/api/login", json={"email": student.email, "password": "abcdef"}).status_code == 200


def test_profile_requires_login(client):
    assert client.get(API).status_code == 401


def test_health(client):
    data = client.get("/api/v1/health").json()
    assert data["status"] == "ok"
    assert data["environment"] == "testing"


def test_room_lookups(client):
    buildings = client.get("/api/v1/rooms/buildings").json()
    assert "Girls Hostel" in buildings

    rooms = client.get("/api/v1/rooms", params={"building": "Girls Hostel"}).json()
    assert {"value": "G-105", "label": "G-105 - Block A", "type": "Hostel Room"} in rooms

    assert client.get("/api/v1/rooms").status_code == 422
