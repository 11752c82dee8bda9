"""
Lambda entry point for the admin API.

The application container is built on the first invocation of a cold
start and reused by every later invocation of the same execution
environment.
"""

from typing import Any, Optional

from .app import Application
from .utils.api_types import ApiGatewayEvent
from .utils.responses import ApiGatewayResponse

_application: Optional[Application] = None


def get_application() -> Application:
    global _application
    if _application is None:
        _application = Application.create()
    return _application


def lambda_handler(event: ApiGatewayEvent, context: Any) -> ApiGatewayResponse:
    """API Gateway REST proxy handler."""
    return get_application().handle(event, context)
