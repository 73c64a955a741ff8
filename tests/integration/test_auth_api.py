"""
Signup, captcha login and token resolution on /api/v1/auth.
"""
from complaint_portal.models.base.enums import UserRole

API = "/api/v1/auth"


def _signup_body(**overrides):
    body = {
        "email": "New.Student@Gmail.com",
        "password": "secret123",
        "name": "New Student",
        "role": "student",
        "dob": "2004-01-15",
        "department": "Computer Science",
    }
    body.update(overrides)
    return body


def _login(client, email, password, **extra):
    captcha = client.get(f"{API}/captcha").json()
    body = {
        "email": email,
        "password": password,
        "captcha": captcha["captcha"],
        "captchaToken": captcha["captchaToken"],
    }
    body.update(extra)
    return client.post(f"{API}/login", json=body)


class TestSignup:
    def test_student_signup(self, client):
        response = client.post(f"{API}/signup", json=_signup_body())

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.student@gmail.com"
        assert data["role"] == "student"
        assert data["department"] == "Computer Science"
        assert data["uid"]
        assert "password" not in data

    def test_staff_department_is_not_kept(self, client):
        response = client.post(
            f"{API}/signup",
            json=_signup_body(email="lecturer@staff.com", role="staff"),
        )
        assert response.status_code == 201
        assert response.json()["department"] is None

    def test_blank_department_is_stored_as_null(self, client):
        response = client.post(f"{API}/signup", json=_signup_body(department="  "))
        assert response.status_code == 201
        assert response.json()["department"] is None

        body = _signup_body(email="nodept@gmail.com")
        del body["department"]
        response = client.post(f"{API}/signup", json=body)
        assert response.status_code == 201
        assert response.json()["department"] is None

    def test_wrong_domain_for_role(self, client):
        response = client.post(f"{API}/signup", json=_signup_body(email="someone@yahoo.com"))

        assert response.status_code == 422
        assert response.json()["error"]["message"] == (
            "Please signup with your official Student Gmail ending with @gmail.com"
        )

    def test_supervisor_needs_category(self, client):
        response = client.post(
            f"{API}/signup",
            json=_signup_body(email="boss@sup.com", role="supervisor"),
        )
        assert response.status_code == 422
        assert response.json()["error"]["message"] == "Please select a category for supervisor role."

        response = client.post(
            f"{API}/signup",
            json=_signup_body(email="boss@sup.com", role="supervisor", category="Plumbing", department="Ops"),
        )
        assert response.status_code == 201
        assert response.json()["category"] == "Plumbing"
        assert response.json()["department"] is None

    def test_admin_cannot_self_register(self, client):
        response = client.post(f"{API}/signup", json=_signup_body(email="root@admin.com", role="admin"))
        assert response.status_code == 403

    def test_duplicate_email(self, client, student):
        response = client.post(f"{API}/signup", json=_signup_body(email=student.email.upper()))
        assert response.status_code == 409
        assert response.json()["error"]["message"] == "Email already registered."

    def test_short_password(self, client):
        response = client.post(f"{API}/signup", json=_signup_body(password="abc"))
        assert response.status_code == 422


class TestLogin:
    def test_login_and_me(self, client, student):
        response = _login(client, student.email, "secret123")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["redirect"] == "/student-dashboard"
        assert data["tokenType"] == "bearer"
        assert data["userData"]["uid"] == student.id

        me = client.get(f"{API}/me", headers={"Authorization": f"Bearer {data['accessToken']}"})
        assert me.status_code == 200
        assert me.json()["email"] == student.email

    def test_wrong_captcha(self, client, student):
        captcha = client.get(f"{API}/captcha").json()
        response = client.post(
            f"{API}/login",
            json={
                "email": student.email,
                "password": "secret123",
                "captcha": "nope",
                "captchaToken": captcha["captchaToken"],
            },
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Captcha incorrect!"

    def test_wrong_password(self, client, student):
        response = _login(client, student.email, "wrong-password")
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Incorrect password"

    def test_maintenance_key(self, client, maintenance):
        response = _login(client, maintenance.email, "secret123", maintenanceKey="guess")
        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Invalid Maintenance Key!"

        response = _login(client, maintenance.email, "secret123", maintenanceKey="test-maintenance-key")
        assert response.status_code == 200
        assert response.json()["redirect"] == "/maintenance-dashboard"

    def test_role_redirects(self, client, make_user):
        admin = make_user(UserRole.ADMIN)
        assert _login(client, admin.email, "secret123").json()["redirect"] == "/admin-dashboard"

    def test_me_requires_token(self, client):
        response = client.get(f"{API}/me")
        assert response.status_code == 401

    def test_me_rejects_garbage_token(self, client):
        response = client.get(f"{API}/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
