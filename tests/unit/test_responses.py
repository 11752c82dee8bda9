"""Tests for the ApiResult envelope and record builders."""

import json
from decimal import Decimal

from onpoint_admin.utils.errors import GENERIC_ERROR_MESSAGE, AppError, ErrorCode
from onpoint_admin.utils.responses import (
    CORS_HEADERS,
    ApiResult,
    build_list_response,
    build_record_response,
    build_user_response,
    not_found,
)


class TestApiResult:
    """Tests for ApiResult serialization."""

    def test_ok_body(self) -> None:
        result = ApiResult.ok({"id": "product_1"}, "Done", count=1)

        assert result.status_code == 200
        assert result.to_body() == {
            "success": True,
            "data": {"id": "product_1"},
            "message": "Done",
            "count": 1,
        }

    def test_ok_without_data_omits_key(self) -> None:
        assert ApiResult.ok(tags=[]).to_body() == {"success": True, "tags": []}

    def test_created_status(self) -> None:
        assert ApiResult.created({"id": "x"}).status_code == 201

    def test_failure_body(self) -> None:
        result = ApiResult.failure("User not found", 200)

        assert result.to_body() == {"success": False, "error": "User not found"}

    def test_from_app_error(self) -> None:
        error = AppError(ErrorCode.INVALID_INPUT, "Missing name", {"missingFields": ["name"]})

        result = ApiResult.from_exception(error)

        assert result.status_code == 400
        assert result.to_body() == {
            "success": False,
            "error": "Missing name",
            "errorCode": "INVALID_INPUT",
            "missingFields": ["name"],
        }

    def test_from_unexpected_exception(self) -> None:
        result = ApiResult.from_exception(RuntimeError("db password is hunter2"))

        assert result.status_code == 500
        assert result.to_body()["error"] == GENERIC_ERROR_MESSAGE
        assert "hunter2" not in json.dumps(result.to_body())

    def test_to_response_has_cors_and_json(self) -> None:
        result = ApiResult.ok({"price": Decimal("12.5"), "stock": Decimal("3")})
        result.headers["Set-Cookie"] = "a=b"

        response = result.to_response()

        assert response["statusCode"] == 200
        for key, value in CORS_HEADERS.items():
            assert response["headers"][key] == value
        assert response["headers"]["Set-Cookie"] == "a=b"
        assert json.loads(response["body"])["data"] == {"price": 12.5, "stock": 3}


class TestBuilders:
    def test_not_found(self) -> None:
        error = not_found("Logo", "logo_1")

        assert error.error_code == ErrorCode.NOT_FOUND
        assert error.details == {"id": "logo_1"}

    def test_user_response_drops_password(self) -> None:
        item = {
            "id": "user_1",
            "email": "ana@example.com",
            "password": "$argon2id$...",
            "firstName": "Ana",
            "lastName": "Lopez",
            "role": "admin",
            "status": "active",
            "createdAt": "2024-01-01T00:00:00.000+00:00",
            "updatedAt": "2024-01-01T00:00:00.000+00:00",
        }

        user = build_user_response(item)

        assert "password" not in user
        assert user["email"] == "ana@example.com"
        assert user["phone"] is None

    def test_record_response_normalizes_numbers_and_tags(self) -> None:
        record = build_record_response(
            {"id": "product_1", "price": Decimal("9.99"), "stock": Decimal("4")}
        )

        assert record == {"id": "product_1", "price": 9.99, "stock": 4, "tags": []}

    def test_record_response_keeps_tag_list(self) -> None:
        record = build_record_response({"id": "provider_1", "tags": ["a", "b"]})

        assert record["tags"] == ["a", "b"]

    def test_list_response(self) -> None:
        items = [{"id": "a"}, {"id": "b"}]

        assert build_list_response(items, lambda item: item["id"]) == ["a", "b"]
