"""
Legacy /api handlers: flat error bodies and the original messages.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from complaint_portal.config.settings import settings
from complaint_portal.models.user import User


class TestLegacyLogin:
    def test_missing_fields(self, client):
        assert client.post("/api/login", json={}).json() == {"error": "Email and password are required"}
        response = client.post("/api/login")
        assert response.status_code == 400
        assert response.json() == {"error": "Email and password are required"}

    def test_unknown_email(self, client):
        response = client.post("/api/login", json={"email": "ghost@gmail.com", "password": "x"})
        assert response.status_code == 401
        assert response.json() == {"error": "Email not found"}

    def test_success_hides_password(self, client, student):
        response = client.post("/api/login", json={"email": student.email, "password": " secret123 "})

        assert response.status_code == 200
        user_data = response.json()["userData"]
        assert user_data["uid"] == student.id
        assert "password" not in user_data

    def test_plaintext_legacy_record(self, client, make_user):
        user = make_user(password="plainpass", hashed=False)
        response = client.post("/api/login", json={"email": user.email, "password": "plainpass"})
        assert response.status_code == 200

    def test_account_without_password(self, client, make_user):
        user = make_user(password=None)
        response = client.post("/api/login", json={"email": user.email, "password": "anything"})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    def test_method_not_allowed(self, client):
        response = client.get("/api/login")
        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


class TestPasswordHandlers:
    def test_change_password(self, client, student):
        body = {"email": student.email, "currentPassword": "secret123", "newPassword": "newsecret"}
        response = client.post("/api/change-password", json=body)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Password changed successfully"}
        login = client.post("/api/login", json={"email": student.email, "password": "newsecret"})
        assert login.status_code == 200

    def test_change_password_validation(self, client, student):
        response = client.post("/api/change-password", json={"email": student.email})
        assert response.status_code == 400
        assert response.json() == {"error": "Email, current password, and new password are required"}

        body = {"email": student.email, "currentPassword": "secret123", "newPassword": "abc"}
        response = client.post("/api/change-password", json=body)
        assert response.json() == {"error": "New password must be at least 6 characters long"}

        body = {"email": student.email, "currentPassword": "wrong", "newPassword": "abcdef"}
        response = client.post("/api/change-password", json=body)
        assert response.status_code == 401
        assert response.json() == {"error": "Current password is incorrect"}

        body = {"email": "ghost@gmail.com", "currentPassword": "x", "newPassword": "abcdef"}
        response = client.post("/api/change-password", json=body)
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_update_password(self, client, student):
        response = client.post("/api/update-password", json={"email": "ghost@gmail.com", "newPassword": "abcdef"})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found."}

        response = client.post("/api/update-password", json={"email": student.email, "newPassword": "abcdef"})
        assert response.status_code == 200
        assert response.json() == {"message": "Password updated successfully. Please log in."}

    def test_forgot_password_issues_working_temporary_password(self, client, db_session, student):
        response = client.post("/api/forgot-password", json={"email": student.email, "dob": "05-03-2003"})

        assert response.status_code == 200
        data = response.json()
        temp = data["tempPassword"]
        assert data["newPassword"] == temp
        assert data["message"] == f"Password reset successful. Your new password is: {temp}"

        db_session.expire_all()
        stored = db_session.get(User, student.id).password
        assert stored != temp
        login = client.post("/api/login", json={"email": student.email, "password": temp})
        assert login.status_code == 200

    def test_forgot_password_rejects_wrong_dob(self, client, student):
        response = client.post("/api/forgot-password", json={"email": student.email, "dob": "2001-01-01"})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found or Date of Birth does not match"}

        response = client.post("/api/forgot-password", json={"email": student.email})
        assert response.status_code == 400
        assert response.json() == {"error": "Email and Date of Birth are required"}

    @pytest.mark.parametrize("dob", ["March 2003", "2003-03", "03-2003", "05-03"])
    def test_forgot_password_rejects_partial_dob(self, client, db_session, student, dob):
        for day in range(1, 29):
            student.dob = f"{day:02d}-03-2003"
            db_session.commit()
            response = client.post("/api/forgot-password", json={"email": student.email, "dob": dob})
            assert response.status_code == 404, student.dob

    def test_forgot_password_accepts_same_date_in_another_format(self, client, student):
        response = client.post("/api/forgot-password", json={"email": student.email, "dob": "05/03/2003"})
        assert response.status_code == 200

    def test_verify_user(self, client, student):
        response = client.post("/api/verify-user", json={"email": student.email})
        assert response.json() == {"message": "User verified successfully."}

        response = client.post("/api/verify-user", json={"email": "ghost@gmail.com"})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found."}

        response = client.post("/api/verify-user", json={})
        assert response.status_code == 400


def _upstream(status_code, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    if payload is None:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


class TestResetWithVerification:
    target = "complaint_portal.services.auth.password_service.requests.post"

    def test_passes_upstream_success_through(self, client):
        with patch(self.target, return_value=_upstream(200, {"message": "Password reset"})) as post:
            response = client.post("/api/resetPasswordWithVerification", json={"email": "a@gmail.com", "code": "1"})

        assert response.status_code == 200
        assert response.json() == {"message": "Password reset"}
        url = post.call_args.args[0]
        assert url == "https://functions.example.test/resetPasswordWithVerification"
        assert post.call_args.kwargs["json"] == {"email": "a@gmail.com", "code": "1"}

    def test_passes_upstream_error_status_through(self, client):
        with patch(self.target, return_value=_upstream(403, {"error": "Invalid code"})):
            response = client.post("/api/resetPasswordWithVerification", json={})

        assert response.status_code == 403
        assert response.json() == {"error": "Invalid code"}

    def test_non_json_upstream(self, client):
        with patch(self.target, return_value=_upstream(502, text="<html>Bad gateway</html>")):
            response = client.post("/api/resetPasswordWithVerification", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "Invalid response from server: <html>Bad gateway</html>"}

    def test_network_failure(self, client):
        with patch(self.target, side_effect=requests.ConnectionError("down")):
            response = client.post("/api/resetPasswordWithVerification", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_unconfigured_function_url(self, client):
        with patch.object(settings, "PASSWORD_RESET_FUNCTION_URL", None), patch(self.target) as post:
            response = client.post("/api/resetPasswordWithVerification", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        post.assert_not_called()
