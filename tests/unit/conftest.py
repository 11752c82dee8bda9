"""
Test fixtures for the admin API tests.

Provides settings, mocked DynamoDB tables and a fully built application
container, plus session tokens for each role.
"""

from typing import Any, Dict, Generator

import boto3
import pytest
from moto import mock_aws

from onpoint_admin.app import Application
from onpoint_admin.config import Settings
from onpoint_admin.utils.auth import issue_session_token
from tests.unit.fixtures import make_env
from tests.unit.table_schemas import create_all_tables


@pytest.fixture
def aws_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set fake AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def settings() -> Settings:
    """Settings for a local environment using the store credentials provider."""
    return Settings.from_env(make_env())


@pytest.fixture
def dynamodb(aws_credentials: None) -> Generator[Any, None, None]:
    """DynamoDB resource with every entity table created."""
    with mock_aws():
        resource = boto3.resource("dynamodb", region_name="us-east-1")
        create_all_tables(resource)
        yield resource


@pytest.fixture
def app(settings: Settings, dynamodb: Any) -> Application:
    """Application container wired to the mocked tables."""
    return Application.create(settings, dynamodb)


@pytest.fixture
def dev_app(dynamodb: Any) -> Application:
    """Application container using the development credentials provider."""
    return Application.create(Settings.from_env(make_env(AUTH_PROVIDER="dev")), dynamodb)


@pytest.fixture
def admin_user(app: Application) -> Dict[str, Any]:
    """Stored active admin (password 'admin-password-1')."""
    return app.users.create(
        {
            "email": "admin@onpoint.example.com",
            "password": "admin-password-1",
            "firstName": "Root",
            "lastName": "Admin",
            "role": "admin",
            "status": "active",
        }
    )


@pytest.fixture
def admin_token(app: Application, admin_user: Dict[str, Any]) -> str:
    return issue_session_token(app.settings, admin_user["id"], admin_user["email"], "admin")


@pytest.fixture
def editor_token(app: Application) -> str:
    return issue_session_token(app.settings, "user_editor", "editor@example.com", "ejecutivo")


@pytest.fixture
def client_token(app: Application) -> str:
    return issue_session_token(app.settings, "user_client", "client@example.com", "cliente")


@pytest.fixture
def lambda_context() -> Any:
    """Mock Lambda context."""

    class MockContext:
        function_name = "onpoint-admin-api"
        memory_limit_in_mb = 256
        invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:onpoint-admin-api"
        aws_request_id = "test-request-id"

    return MockContext()
