"""Integration tests for teacher authentication endpoints."""
import pytest

from attendance.core.constants import TEACHER_TOKEN_COOKIE


@pytest.mark.integration
class TestTeacherLogin:
    """Test the login and logout endpoints."""

    def test_login_success(self, client):
        response = client.post(
            "/api/v1/auth/teacher/login",
            json={"email": "prof@example.com", "password": "password123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Welcome back! You're now logged in."
        assert data["teacher"] == {"id": "1", "name": "Professor Smith", "email": "prof@example.com"}
        assert TEACHER_TOKEN_COOKIE in response.cookies

    def test_login_wrong_password(self, client):
        response = client.post(
            "/api/v1/auth/teacher/login",
            json={"email": "prof@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"
        assert TEACHER_TOKEN_COOKIE not in response.cookies

    def test_login_unknown_email(self, client):
        response = client.post(
            "/api/v1/auth/teacher/login",
            json={"email": "someone@example.com", "password": "password123"},
        )
        assert response.status_code == 401

    def test_login_missing_fields(self, client):
        response = client.post("/api/v1/auth/teacher/login", json={"email": "prof@example.com"})
        assert response.status_code == 422

    def test_login_cookie_grants_access(self, client):
        client.post(
            "/api/v1/auth/teacher/login",
            json={"email": "prof@example.com", "password": "password123"},
        )

        response = client.get("/api/v1/auth/me")
        assert response.status_code == 200
        assert response.json()["email"] == "prof@example.com"

    def test_logout(self, teacher_client):
        response = teacher_client.post("/api/v1/auth/teacher/logout")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Logged out successfully"}
        set_cookie = response.headers.get("set-cookie", "")
        assert TEACHER_TOKEN_COOKIE in set_cookie

    def test_logout_without_login(self, client):
        response = client.post("/api/v1/auth/teacher/logout")
        assert response.status_code == 200


@pytest.mark.integration
class TestCurrentTeacher:
    """Test the /me endpoint."""

    def test_me(self, teacher_client):
        response = teacher_client.get("/api/v1/auth/me")

        assert response.status_code == 200
        assert response.json() == {"id": "1", "name": "Professor Smith", "email": "prof@example.com"}

    def test_me_requires_cookie(self, client):
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_me_invalid_token(self, client):
        client.cookies.set(TEACHER_TOKEN_COOKIE, "not-a-jwt")
        response = client.get("/api/v1/auth/me")

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"
