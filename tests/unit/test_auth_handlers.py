"""Tests for the login / session routes."""

from typing import Any, Dict
from unittest.mock import MagicMock

import pytest

from onpoint_admin.app import Application
from onpoint_admin.utils.api_types import SESSION_COOKIE
from onpoint_admin.utils.auth import issue_session_token
from tests.unit.fixtures import make_event, parse_body


class TestLogin:
    """POST /api/auth/login"""

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"email": "", "password": "secret-pass"},
            {"email": "ana@example.com", "password": ""},
            {"email": "   ", "password": "secret-pass"},
            {"email": "ana@example.com", "password": 12345678},
        ],
    )
    def test_empty_credentials_rejected_before_provider(
        self, app: Application, body: Dict[str, Any]
    ) -> None:
        app.credentials = MagicMock()

        response = app.handle(make_event("POST", "/api/auth/login", body))

        assert response["statusCode"] == 400
        assert parse_body(response)["success"] is False
        assert parse_body(response)["error"] == "Email and password are required"
        app.credentials.authenticate.assert_not_called()

    def test_success_sets_cookie(self, app: Application, admin_user: Dict[str, Any]) -> None:
        response = app.handle(
            make_event(
                "POST",
                "/api/auth/login",
                {"email": admin_user["email"], "password": "admin-password-1"},
            )
        )

        body = parse_body(response)
        assert response["statusCode"] == 200
        assert body["success"] is True
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["id"] == admin_user["id"]
        assert "password" not in body["data"]["user"]
        assert body["data"]["token"]

        cookie = response["headers"]["Set-Cookie"]
        assert cookie.startswith(f"{SESSION_COOKIE}={body['data']['token']};")
        assert "HttpOnly" in cookie
        assert "Max-Age=86400" in cookie
        assert "Secure" not in cookie

    def test_token_carries_role(self, app: Application, admin_user: Dict[str, Any]) -> None:
        login = parse_body(
            app.handle(
                make_event(
                    "POST",
                    "/api/auth/login",
                    {"email": admin_user["email"], "password": "admin-password-1"},
                )
            )
        )

        verified = app.handle(
            make_event("POST", "/api/auth/verify-token", token=login["data"]["token"])
        )

        session = parse_body(verified)["data"]["session"]
        assert session["role"] == "admin"

    def test_wrong_password(self, app: Application, admin_user: Dict[str, Any]) -> None:
        response = app.handle(
            make_event(
                "POST", "/api/auth/login", {"email": admin_user["email"], "password": "wrong-one"}
            )
        )

        assert response["statusCode"] == 401
        assert parse_body(response)["error"] == "Invalid credentials"
        assert "Set-Cookie" not in response["headers"]

    def test_dev_provider_accepts_any_pair(self, dev_app: Application) -> None:
        response = dev_app.handle(
            make_event("POST", "/api/auth/login", {"email": "Dev@Example.com", "password": "x"})
        )

        user = parse_body(response)["data"]["user"]
        assert response["statusCode"] == 200
        assert user["email"] == "dev@example.com"
        assert user["role"] == "ejecutivo"

    def test_password_not_logged(
        self, app: Application, admin_user: Dict[str, Any], capsys: pytest.CaptureFixture[str]
    ) -> None:
        app.handle(
            make_event(
                "POST",
                "/api/auth/login",
                {"email": admin_user["email"], "password": "admin-password-1"},
            )
        )

        assert "admin-password-1" not in capsys.readouterr().out


class TestLogout:
    def test_clears_cookie(self, app: Application) -> None:
        response = app.handle(make_event("POST", "/api/auth/logout"))

        assert response["statusCode"] == 200
        assert response["headers"]["Set-Cookie"].startswith(f"{SESSION_COOKIE}=;")
        assert "Max-Age=0" in response["headers"]["Set-Cookie"]


class TestVerifyToken:
    """POST /api/auth/verify-token"""

    def test_missing_token(self, app: Application) -> None:
        response = app.handle(make_event("POST", "/api/auth/verify-token"))

        assert response["statusCode"] == 401
        assert parse_body(response)["error"] == "Token not provided"

    def test_invalid_token(self, app: Application) -> None:
        response = app.handle(make_event("POST", "/api/auth/verify-token", token="garbage"))

        assert response["statusCode"] == 401

    def test_bearer_token(self, app: Application, admin_token: str, admin_user: Dict[str, Any]) -> None:
        response = app.handle(make_event("POST", "/api/auth/verify-token", token=admin_token))

        data = parse_body(response)["data"]
        assert response["statusCode"] == 200
        assert data["user"]["id"] == admin_user["id"]
        assert data["session"]["role"] == "admin"
        assert data["session"]["expiresAt"] > 0

    def test_cookie_token(self, app: Application, admin_token: str, admin_user: Dict[str, Any]) -> None:
        event = make_event(
            "POST", "/api/auth/verify-token", headers={"Cookie": f"{SESSION_COOKIE}={admin_token}"}
        )

        response = app.handle(event)

        assert response["statusCode"] == 200
        assert parse_body(response)["data"]["user"]["email"] == admin_user["email"]

    def test_deleted_user(self, app: Application) -> None:
        token = issue_session_token(app.settings, "user_gone", "gone@example.com", "admin")

        response = app.handle(make_event("POST", "/api/auth/verify-token", token=token))

        assert response["statusCode"] == 401

    def test_dev_provider_resolves_from_claims(self, dev_app: Application) -> None:
        token = issue_session_token(dev_app.settings, "dev-a@example.com", "a@example.com", "ejecutivo")

        response = dev_app.handle(make_event("POST", "/api/auth/verify-token", token=token))

        user = parse_body(response)["data"]["user"]
        assert user["id"] == "dev-a@example.com"
        assert user["role"] == "ejecutivo"


class TestGetUser:
    """POST /api/auth/get-user"""

    def test_requires_email(self, app: Application) -> None:
        response = app.handle(make_event("POST", "/api/auth/get-user", {}))

        assert response["statusCode"] == 400

    def test_not_found_is_success_false(self, app: Application) -> None:
        response = app.handle(make_event("POST", "/api/auth/get-user", {"email": "nobody@example.com"}))

        assert response["statusCode"] == 200
        assert parse_body(response) == {"success": False, "error": "User not found"}

    def test_found_without_password(self, app: Application, admin_user: Dict[str, Any]) -> None:
        response = app.handle(
            make_event("POST", "/api/auth/get-user", {"email": admin_user["email"].upper()})
        )

        user = parse_body(response)["data"]["user"]
        assert user["id"] == admin_user["id"]
        assert "password" not in user
        assert "$argon2" not in response["body"]
