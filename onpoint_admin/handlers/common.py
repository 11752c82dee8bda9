"""Helpers shared by the catalog route handlers."""

from typing import TYPE_CHECKING, Any, Dict, Iterable

from ..repositories.base import EntityRepository
from ..utils.api_types import Request
from ..utils.auth import SessionClaims, require_role
from ..utils.errors import AppError, ErrorCode
from ..utils.responses import not_found

if TYPE_CHECKING:
    from ..app import Application

EDITOR_ROLES = ("admin", "ejecutivo")
ADMIN_ROLES = ("admin",)


def require_editor(request: Request, app: "Application") -> SessionClaims:
    """Catalog writes need an admin or ejecutivo session."""
    return require_role(app.session(request), EDITOR_ROLES)


def require_admin(request: Request, app: "Application") -> SessionClaims:
    return require_role(app.session(request), ADMIN_ROLES)


def path_id(request: Request) -> str:
    record_id = request.path_params.get("id", "").strip()
    if not record_id:
        raise AppError(ErrorCode.INVALID_INPUT, "Record id is required")
    return record_id


def filters_from_query(request: Request, fields: Iterable[str]) -> Dict[str, Any]:
    """
    Pick list filters from the query string.

    `page` and `limit` must be positive integers when present.
    """
    filters: Dict[str, Any] = {
        field: request.query[field] for field in fields if request.query.get(field)
    }
    for key in ("search", "tag"):
        if request.query.get(key):
            filters[key] = request.query[key]
    for key in ("page", "limit"):
        value = request.query.get(key)
        if value is None:
            continue
        if not (value.isascii() and value.isdecimal()) or int(value) < 1:
            raise AppError(
                ErrorCode.INVALID_INPUT, f"{key} must be a positive integer", {"field": key}
            )
        filters[key] = int(value)
    return filters


def get_or_404(repository: EntityRepository, record_id: str) -> Dict[str, Any]:
    record = repository.find_by_id(record_id)
    if record is None:
        raise not_found(repository.entity_name, record_id)
    return record


def pick(data: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    """Keep only known fields of a request body."""
    return {field: data[field] for field in fields if field in data}
