"""
Type definitions for API Gateway proxy events.

Provides TypedDict definitions for the REST proxy integration event and a
parsed `Request` view handlers work with.
"""

import base64
import binascii
import json
from dataclasses import dataclass, field
from http.cookies import SimpleCookie
from typing import Any, Dict, Optional, TypedDict

from .errors import AppError, ErrorCode

SESSION_COOKIE = "onpoint_session"


class RequestContext(TypedDict, total=False):
    """API Gateway request context."""

    requestId: str
    stage: str
    identity: Dict[str, Any]


class ApiGatewayEvent(TypedDict, total=False):
    """API Gateway REST proxy integration event."""

    httpMethod: str
    path: str
    resource: str
    headers: Optional[Dict[str, str]]
    queryStringParameters: Optional[Dict[str, str]]
    pathParameters: Optional[Dict[str, str]]
    body: Optional[str]
    isBase64Encoded: bool
    requestContext: RequestContext


@dataclass
class Request:
    """Parsed view of a proxy event."""

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    path_params: Dict[str, str] = field(default_factory=dict)
    raw_body: Optional[str] = None
    correlation_id: Optional[str] = None

    @classmethod
    def from_event(cls, event: ApiGatewayEvent, correlation_id: Optional[str] = None) -> "Request":
        """
        Build a request from a proxy event.

        Raises:
            AppError: INVALID_JSON if a base64 body does not decode to UTF-8 text
        """
        body = event.get("body")
        if body is not None and event.get("isBase64Encoded"):
            try:
                body = base64.b64decode(body, validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError):
                raise AppError(ErrorCode.INVALID_JSON, "Request body is not valid base64 UTF-8 text")

        path = event.get("path") or "/"
        if len(path) > 1:
            path = path.rstrip("/")

        return cls(
            method=(event.get("httpMethod") or "GET").upper(),
            path=path,
            # HTTP header names are case-insensitive
            headers={k.lower(): v for k, v in (event.get("headers") or {}).items()},
            query=dict(event.get("queryStringParameters") or {}),
            path_params=dict(event.get("pathParameters") or {}),
            raw_body=body,
            correlation_id=correlation_id,
        )

    def json(self) -> Dict[str, Any]:
        """
        Parse the JSON body (an empty body is an empty object).

        Raises:
            AppError: INVALID_JSON if the body is not a JSON object
        """
        if self.raw_body is None or not self.raw_body.strip():
            return {}
        try:
            parsed = json.loads(self.raw_body)
        except json.JSONDecodeError:
            raise AppError(ErrorCode.INVALID_JSON, "Request body is not valid JSON")
        if not isinstance(parsed, dict):
            raise AppError(ErrorCode.INVALID_JSON, "Request body must be a JSON object")
        return parsed

    def cookies(self) -> Dict[str, str]:
        raw = self.headers.get("cookie")
        if not raw:
            return {}
        jar = SimpleCookie()
        jar.load(raw)
        return {name: morsel.value for name, morsel in jar.items()}

    def session_token(self) -> Optional[str]:
        """Bearer token from the Authorization header, else the session cookie."""
        authorization = self.headers.get("authorization", "")
        if authorization.startswith("Bearer "):
            token = authorization[len("Bearer "):].strip()
            return token or None
        return self.cookies().get(SESSION_COOKIE) or None
