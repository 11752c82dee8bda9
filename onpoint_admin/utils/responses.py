"""
HTTP response builders for API handlers.

Every handler returns an `ApiResult`; `ApiResult.to_response` is the only
place the JSON envelope and API Gateway proxy response are produced.
Record builders normalize stored items into the shapes clients receive.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict, cast

from .dynamodb import dumps, from_dynamodb
from .errors import AppError, ErrorCode, handle_error

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token,X-Correlation-Id"
    ),
    "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE,OPTIONS",
    "Access-Control-Max-Age": "86400",
}


class ApiGatewayResponse(TypedDict):
    """API Gateway proxy integration response."""

    statusCode: int
    headers: Dict[str, str]
    body: str


@dataclass
class ApiResult:
    """Tagged success/error outcome of a route handler."""

    success: bool
    status_code: int = 200
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def ok(
        cls, data: Any = None, message: Optional[str] = None, status_code: int = 200, **extras: Any
    ) -> "ApiResult":
        return cls(True, status_code, data=data, message=message, extras=extras)

    @classmethod
    def created(cls, data: Any, message: Optional[str] = None, **extras: Any) -> "ApiResult":
        return cls.ok(data, message, status_code=201, **extras)

    @classmethod
    def failure(
        cls, error: str, status_code: int, message: Optional[str] = None, **extras: Any
    ) -> "ApiResult":
        return cls(False, status_code, error=error, message=message, extras=extras)

    @classmethod
    def from_exception(cls, exc: Exception) -> "ApiResult":
        """Build the error result for any exception (generic text unless AppError)."""
        details = handle_error(exc)
        error_code = details.pop("errorCode")
        message = details.pop("message")
        status_code = exc.status_code if isinstance(exc, AppError) else 500
        return cls.failure(message, status_code, errorCode=error_code, **details)

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.success}
        if self.success:
            if self.data is not None:
                body["data"] = self.data
        else:
            body["error"] = self.error
        if self.message:
            body["message"] = self.message
        body.update(self.extras)
        return body

    def to_response(self) -> ApiGatewayResponse:
        return ApiGatewayResponse(
            statusCode=self.status_code,
            headers={**CORS_HEADERS, **self.headers},
            body=dumps(self.to_body()),
        )


def not_found(entity: str, entity_id: str) -> AppError:
    """Build the NOT_FOUND error for a missing record."""
    return AppError(ErrorCode.NOT_FOUND, f"{entity} {entity_id} not found", {"id": entity_id})


class UserResponse(TypedDict, total=False):
    """User record as returned to clients (never carries the password hash)."""

    id: str
    email: str
    firstName: str
    lastName: str
    phone: Optional[str]
    role: str
    status: str
    department: Optional[str]
    position: Optional[str]
    lastLogin: Optional[str]
    createdBy: Optional[str]
    createdAt: str
    updatedAt: str


def build_user_response(item: Dict[str, Any]) -> UserResponse:
    """
    Build a User response from a DynamoDB item.

    Args:
        item: DynamoDB item dictionary

    Returns:
        UserResponse without the password hash
    """
    return UserResponse(
        id=cast(str, item.get("id", "")),
        email=cast(str, item.get("email", "")),
        firstName=cast(str, item.get("firstName", "")),
        lastName=cast(str, item.get("lastName", "")),
        phone=item.get("phone"),
        role=cast(str, item.get("role", "")),
        status=cast(str, item.get("status", "")),
        department=item.get("department"),
        position=item.get("position"),
        lastLogin=item.get("lastLogin"),
        createdBy=item.get("createdBy"),
        createdAt=cast(str, item.get("createdAt", "")),
        updatedAt=cast(str, item.get("updatedAt", "")),
    )


def build_record_response(item: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build a catalog record (product, provider, logo) response.

    Numbers come back as int/float, and `tags` is always a list.
    """
    record = from_dynamodb(item)
    tags = record.get("tags")
    record["tags"] = list(tags) if isinstance(tags, list) else []
    return cast(Dict[str, Any], record)


def build_list_response(items: List[Dict[str, Any]], builder: Any) -> List[Any]:
    """
    Build a list of responses using a builder function.

    Args:
        items: List of DynamoDB items
        builder: Builder function to apply to each item

    Returns:
        List of built responses
    """
    return [builder(item) for item in items]
