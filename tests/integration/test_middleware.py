"""
Request ID, timing and security headers on every response.
"""
import uuid

HEALTH = "/api/v1/health"


def test_request_id_is_echoed(client):
    response = client.get(HEALTH, headers={"X-Request-ID": "req-abc-123"})
    assert response.headers["X-Request-ID"] == "req-abc-123"


def test_request_id_is_generated(client):
    first = client.get(HEALTH).headers["X-Request-ID"]
    second = client.get(HEALTH).headers["X-Request-ID"]

    assert str(uuid.UUID(first)) == first
    assert first != second


def test_process_time_header(client):
    response = client.get(HEALTH)
    assert float(response.headers["X-Process-Time"]) >= 0


def test_security_headers_on_success_and_error(client):
    for response in (client.get(HEALTH), client.post("/api/login", json={})):
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-XSS-Protection"] == "1; mode=block"
        assert response.headers["Strict-Transport-Security"] == "max-age=31536000; includeSubDomains"
        assert "X-Request-ID" in response.headers
