"""Tests for the diagnostic routes."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from onpoint_admin.app import Application
from onpoint_admin.config import Settings
from tests.unit.fixtures import TEST_AUTH_SECRET, make_env, make_event, parse_body
from tests.unit.table_schemas import LOGOS_TABLE, PRODUCTS_TABLE, PROVIDERS_TABLE, USERS_TABLE


@pytest.fixture
def prod_app(dynamodb: Any) -> Application:
    return Application.create(Settings.from_env(make_env(APP_ENVIRONMENT="prod")), dynamodb)


class TestDebugEnv:
    def test_reports_configuration(self, app: Application) -> None:
        response = app.handle(make_event("GET", "/api/debug-env"))

        data = parse_body(response)["data"]
        assert response["statusCode"] == 200
        assert data["environment"] == "local"
        assert data["region"] == "us-east-1"
        assert data["tables"]["users"] == USERS_TABLE
        assert data["hasExplicitCredentials"] is False
        assert data["hasCustomEndpoint"] is False
        assert data["authProvider"] == "store"

    def test_no_secrets(self, app: Application) -> None:
        response = app.handle(make_event("GET", "/api/debug-env"))

        assert TEST_AUTH_SECRET not in response["body"]

    def test_hidden_in_production(self, prod_app: Application) -> None:
        response = prod_app.handle(make_event("GET", "/api/debug-env"))

        assert response["statusCode"] == 404


class TestConnection:
    """GET /api/test-dynamodb-connection"""

    def test_all_tables_reachable(self, app: Application) -> None:
        response = app.handle(make_event("GET", "/api/test-dynamodb-connection"))

        data = parse_body(response)["data"]
        assert response["statusCode"] == 200
        assert data["tables"] == {"users": True, "products": True, "providers": True, "logos": True}
        assert set(data["visibleTables"]) >= {USERS_TABLE, PRODUCTS_TABLE, PROVIDERS_TABLE, LOGOS_TABLE}

    def test_unreachable_table(self, app: Application) -> None:
        app.logos.table = MagicMock()
        app.logos.table.scan.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "Requested resource not found"}},
            "Scan",
        )

        response = app.handle(make_event("GET", "/api/test-dynamodb-connection"))

        body = parse_body(response)
        assert response["statusCode"] == 503
        assert body["success"] is False
        assert body["error"] == "DynamoDB connection failed"
        assert body["data"]["tables"]["logos"] is False
        assert "Requested resource not found" not in response["body"]

    def test_hidden_in_production(self, prod_app: Application) -> None:
        response = prod_app.handle(make_event("GET", "/api/test-dynamodb-connection"))

        assert response["statusCode"] == 404
