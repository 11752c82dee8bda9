"""
Diagnostic routes for non-production environments.

They report configuration shape and table reachability only: no secret
values, no exception text.
"""

from typing import TYPE_CHECKING, Dict

from botocore.exceptions import BotoCoreError, ClientError

from ..utils.api_types import Request
from ..utils.errors import AppError, ErrorCode
from ..utils.logging import get_logger
from ..utils.responses import ApiResult

if TYPE_CHECKING:
    from ..app import Application

logger = get_logger(__name__)


def _require_non_production(request: Request, app: "Application") -> None:
    if app.settings.is_production:
        raise AppError(ErrorCode.NOT_FOUND, f"No route for {request.path}")


def debug_env(request: Request, app: "Application") -> ApiResult:
    """GET /api/debug-env"""
    _require_non_production(request, app)
    settings = app.settings
    return ApiResult.ok(
        {
            "environment": settings.environment,
            "environmentName": settings.environment_config.name,
            "apiUrl": settings.environment_config.api_url,
            "region": settings.region,
            "tables": {
                "users": settings.tables.users,
                "products": settings.tables.products,
                "providers": settings.tables.providers,
                "logos": settings.tables.logos,
            },
            "hasExplicitCredentials": settings.has_explicit_credentials,
            "hasCustomEndpoint": settings.endpoint_url is not None,
            "authProvider": app.credentials.name,
        }
    )


def test_dynamodb_connection(request: Request, app: "Application") -> ApiResult:
    """GET /api/test-dynamodb-connection - reachability of every entity table."""
    _require_non_production(request, app)
    tables: Dict[str, bool] = {
        "users": app.users.test_connection(),
        "products": app.products.test_connection(),
        "providers": app.providers.test_connection(),
        "logos": app.logos.test_connection(),
    }
    try:
        visible_tables = app.store.list_tables()
    except (ClientError, BotoCoreError) as e:
        logger.error("Could not list tables", error=str(e))
        visible_tables = []

    if all(tables.values()):
        return ApiResult.ok({"tables": tables, "visibleTables": visible_tables})
    return ApiResult.failure(
        "DynamoDB connection failed", 503, data={"tables": tables, "visibleTables": visible_tables}
    )


ROUTES = [
    ("GET", "/api/debug-env", debug_env),
    ("GET", "/api/test-dynamodb-connection", test_dynamodb_connection),
]
