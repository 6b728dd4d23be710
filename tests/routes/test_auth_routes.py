"""Tests for authentication, the error envelope and /me."""
from conftest import BRAND_ID, auth


class TestAuthentication:
    """Tests for token handling."""

    def test_missing_token(self, client):
        response = client.get("/api/brands")
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized"}

    def test_invalid_token(self, client):
        response = client.get("/api/brands", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_auth_cookie(self, client):
        client.cookies.set("sb-access-token", "token-admin")
        assert client.get("/api/me").status_code == 200

    def test_role_gate_message(self, client):
        response = client.post("/api/brands", json={"name": "New"}, headers=auth("editor"))
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden: You do not have permission to access this resource."


class TestMe:
    def test_returns_user_and_permissions(self, client):
        response = client.get("/api/me", headers=auth("editor"))

        body = response.json()
        assert body["success"] is True
        assert body["user"]["id"] == "editor"
        assert body["brand_permissions"] == [{"brand_id": BRAND_ID, "role": "editor"}]
        assert body["profile"]["email"] == "editor@example.com"


class TestEnvelope:
    def test_invalid_json_body(self, client):
        response = client.post(
            "/api/claims",
            content="{not json",
            headers={**auth("admin"), "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"] == "Invalid request body"

    def test_health_ready(self, client):
        response = client.get("/api/health/ready")
        assert response.json()["ready"] is True
