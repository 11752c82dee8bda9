"""
User route handlers.

Listing and reading users is open; every write needs an admin session.
Password hashes never leave the repository layer.
"""

from typing import TYPE_CHECKING, Any, Dict

from ..utils.api_types import Request
from ..utils.errors import AppError, ErrorCode
from ..utils.logging import get_logger
from ..utils.responses import ApiResult, build_list_response, build_user_response, not_found
from ..utils.validation import USER_ROLES, USER_STATUSES, require_fields, validate_choice
from .common import filters_from_query, get_or_404, path_id, pick, require_admin

if TYPE_CHECKING:
    from ..app import Application

logger = get_logger(__name__)

USER_FIELDS = (
    "email",
    "password",
    "firstName",
    "lastName",
    "phone",
    "role",
    "status",
    "department",
    "position",
)
MIN_PASSWORD_LENGTH = 8


def _clean_user(data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    if not partial:
        require_fields(data, ("email", "password", "firstName", "lastName"))

    user = pick(data, USER_FIELDS)
    present_required = [field for field in ("email", "firstName", "lastName") if field in user]
    require_fields(user, present_required)

    password = user.get("password")
    if password is not None and len(str(password)) < MIN_PASSWORD_LENGTH:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            {"field": "password"},
        )
    validate_choice(user.get("role"), USER_ROLES, "role")
    validate_choice(user.get("status"), USER_STATUSES, "status")

    if not partial:
        user.setdefault("role", "ejecutivo")
        user.setdefault("status", "active")
    return user


def list_users(request: Request, app: "Application") -> ApiResult:
    """GET /api/users"""
    filters = filters_from_query(request, app.users.filter_fields)
    page = app.users.find_all(filters)
    return ApiResult.ok(
        build_list_response(page.items, build_user_response),
        count=len(page.items),
        pagination=page.to_dict(),
    )


def get_user(request: Request, app: "Application") -> ApiResult:
    """GET /api/users/{id}"""
    user = get_or_404(app.users, path_id(request))
    return ApiResult.ok(build_user_response(user))


def create_user(request: Request, app: "Application") -> ApiResult:
    """POST /api/users - admin only; email must be unused."""
    claims = require_admin(request, app)
    user = _clean_user(request.json(), partial=False)
    user["createdBy"] = claims.sub

    created = app.users.create(user)
    logger.info("User created", userId=created["id"], role=created.get("role"))
    return ApiResult.created(build_user_response(created), "User created successfully")


def update_user(request: Request, app: "Application") -> ApiResult:
    """PUT/PATCH /api/users/{id} - admin only."""
    require_admin(request, app)
    user_id = path_id(request)
    updated = app.users.update(user_id, _clean_user(request.json(), partial=True))
    if updated is None:
        raise not_found("User", user_id)
    return ApiResult.ok(build_user_response(updated), "User updated successfully")


def delete_user(request: Request, app: "Application") -> ApiResult:
    """DELETE /api/users/{id} - admin only; admins cannot delete themselves."""
    claims = require_admin(request, app)
    user_id = path_id(request)
    if user_id == claims.sub:
        raise AppError(ErrorCode.INVALID_INPUT, "You cannot delete your own account")
    if not app.users.delete(user_id):
        raise not_found("User", user_id)
    return ApiResult.ok(message="User deleted successfully", id=user_id)


def user_stats(request: Request, app: "Application") -> ApiResult:
    """GET /api/users/stats"""
    return ApiResult.ok(app.users.get_stats())


ROUTES = [
    ("GET", "/api/users", list_users),
    ("POST", "/api/users", create_user),
    # Before /api/users/{id} so "stats" is not taken as an id
    ("GET", "/api/users/stats", user_stats),
    ("GET", "/api/users/{id}", get_user),
    ("PUT", "/api/users/{id}", update_user),
    ("PATCH", "/api/users/{id}", update_user),
    ("DELETE", "/api/users/{id}", delete_user),
]
