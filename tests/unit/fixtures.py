"""
Test data builders.

Factory functions for request bodies, stored records and API Gateway proxy
events with sensible defaults. Override any field with keyword arguments.
"""

import json
from typing import Any, Dict, Optional
from uuid import uuid4

from tests.unit.table_schemas import LOGOS_TABLE, PRODUCTS_TABLE, PROVIDERS_TABLE, USERS_TABLE

TEST_AUTH_SECRET = "unit-test-secret"


def make_env(**overrides: str) -> Dict[str, str]:
    """Environment variables pointing the application at the test tables."""
    env = {
        "APP_ENVIRONMENT": "local",
        "DYNAMODB_REGION": "us-east-1",
        "DYNAMODB_USERS_TABLE": USERS_TABLE,
        "DYNAMODB_PRODUCTS_TABLE": PRODUCTS_TABLE,
        "DYNAMODB_PROVIDERS_TABLE": PROVIDERS_TABLE,
        "DYNAMODB_LOGOS_TABLE": LOGOS_TABLE,
        "AUTH_SECRET": TEST_AUTH_SECRET,
        "AUTH_PROVIDER": "store",
    }
    env.update(overrides)
    return env


def make_product(**overrides: Any) -> Dict[str, Any]:
    """Product request body with every required field."""
    product: Dict[str, Any] = {
        "name": "Stainless Tumbler",
        "category": "drinkware",
        "price": 12.5,
        "sku": f"SKU-{uuid4().hex[:6]}",
        "stock": 40,
    }
    product.update(overrides)
    return product


def make_provider(**overrides: Any) -> Dict[str, Any]:
    """Provider request body."""
    provider: Dict[str, Any] = {
        "name": "Promo Supplies",
        "email": "sales@promo.example.com",
        "industry": "merchandise",
        "tags": ["Printing", "Textiles"],
    }
    provider.update(overrides)
    return provider


def make_logo(**overrides: Any) -> Dict[str, Any]:
    """Logo request body with every required field."""
    logo: Dict[str, Any] = {
        "name": "Acme horizontal",
        "category": "brand",
        "fileUrl": "https://cdn.example.com/logos/acme.svg",
        "clientName": "Acme",
        "clientId": "client_acme",
        "fileType": "svg",
    }
    logo.update(overrides)
    return logo


def make_user(**overrides: Any) -> Dict[str, Any]:
    """User request body (plain-text password)."""
    user: Dict[str, Any] = {
        "email": f"user-{uuid4().hex[:8]}@example.com",
        "password": "correct-horse-battery",
        "firstName": "Ana",
        "lastName": "Lopez",
        "role": "ejecutivo",
        "status": "active",
    }
    user.update(overrides)
    return user


def make_event(
    method: str,
    path: str,
    body: Optional[Any] = None,
    query: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
    token: Optional[str] = None,
    request_id: str = "req-test-123",
) -> Dict[str, Any]:
    """
    Build an API Gateway REST proxy event.

    Args:
        method: HTTP method
        path: Request path
        body: Dict (JSON-encoded) or raw string body
        query: Query string parameters
        headers: Extra request headers
        token: Session token sent as a Bearer Authorization header
        request_id: API Gateway request id (becomes the correlation id)
    """
    event_headers = {"Content-Type": "application/json", **(headers or {})}
    if token:
        event_headers["Authorization"] = f"Bearer {token}"
    if isinstance(body, (dict, list)):
        body = json.dumps(body)
    return {
        "httpMethod": method,
        "path": path,
        "headers": event_headers,
        "queryStringParameters": query,
        "pathParameters": None,
        "body": body,
        "isBase64Encoded": False,
        "requestContext": {"requestId": request_id, "stage": "test"},
    }


def parse_body(response: Dict[str, Any]) -> Dict[str, Any]:
    """Decode the JSON body of a proxy response."""
    return json.loads(response["body"])
