"""
Centralized DynamoDB access.

One `DynamoDBStore` is built per application container; it owns the boto3
resource and hands out table objects by entity name.
"""

import json
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import boto3
from botocore.config import Config

from ..config import Settings

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBServiceResource
    from mypy_boto3_dynamodb.service_resource import Table


# Retries are left to the SDK's adaptive mode
CLIENT_CONFIG = Config(retries={"mode": "adaptive", "max_attempts": 3})


def create_dynamodb_resource(settings: Settings) -> "DynamoDBServiceResource":
    """Create a DynamoDB resource for the configured region and credentials.

    Explicit DYNAMODB_* credentials win; otherwise the default boto3
    credential chain (Lambda role, profile, env) applies.
    """
    kwargs: Dict[str, Any] = {
        "region_name": settings.region,
        "config": CLIENT_CONFIG,
        "endpoint_url": settings.endpoint_url,
    }
    if settings.has_explicit_credentials:
        kwargs["aws_access_key_id"] = settings.access_key_id
        kwargs["aws_secret_access_key"] = settings.secret_access_key
    return boto3.resource("dynamodb", **kwargs)


class DynamoDBStore:
    """Table access with environment-based naming."""

    def __init__(
        self, settings: Settings, resource: Optional["DynamoDBServiceResource"] = None
    ) -> None:
        self.settings = settings
        self.resource = resource or create_dynamodb_resource(settings)

    def table(self, table_name: str) -> "Table":
        return self.resource.Table(table_name)

    @property
    def users(self) -> "Table":
        """Get users table instance."""
        return self.table(self.settings.tables.users)

    @property
    def products(self) -> "Table":
        """Get products table instance."""
        return self.table(self.settings.tables.products)

    @property
    def providers(self) -> "Table":
        """Get providers table instance."""
        return self.table(self.settings.tables.providers)

    @property
    def logos(self) -> "Table":
        """Get logos table instance."""
        return self.table(self.settings.tables.logos)

    def list_tables(self) -> List[str]:
        """List table names visible to the configured credentials."""
        response = self.resource.meta.client.list_tables()
        return list(response.get("TableNames", []))


def to_dynamodb(value: Any) -> Any:
    """Convert floats (at any depth) to Decimal so boto3 accepts them."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamodb(v) for v in value]
    return value


def from_dynamodb(value: Any) -> Any:
    """Convert Decimals (at any depth) back to int or float."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb(v) for k, v in value.items()}
    if isinstance(value, (list, set, tuple)):
        return [from_dynamodb(v) for v in value]
    return value


def json_default(value: Any) -> Any:
    """`json.dumps` hook for values DynamoDB hands back."""
    if isinstance(value, (Decimal, set)):
        return from_dynamodb(value)
    return str(value)


def dumps(value: Any) -> str:
    return json.dumps(value, default=json_default)
