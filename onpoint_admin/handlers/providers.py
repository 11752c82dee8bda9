"""Provider route handlers."""

from typing import TYPE_CHECKING, Any, Dict

from ..utils.api_types import Request
from ..utils.logging import get_logger
from ..utils.responses import ApiResult, build_list_response, build_record_response, not_found
from ..utils.validation import (
    PROVIDER_STATUSES,
    normalize_email,
    require_fields,
    validate_choice,
    validate_tags,
)
from .common import filters_from_query, get_or_404, path_id, pick, require_editor

if TYPE_CHECKING:
    from ..app import Application

logger = get_logger(__name__)

PROVIDER_FIELDS = (
    "name",
    "company",
    "email",
    "phone",
    "address",
    "industry",
    "contactPerson",
    "website",
    "notes",
    "tags",
    "status",
)


def _clean_provider(data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    if not partial:
        require_fields(data, ("name",))

    provider = pick(data, PROVIDER_FIELDS)
    if "name" in provider:
        require_fields(provider, ("name",))
        provider["name"] = str(provider["name"]).strip()
    if provider.get("email"):
        provider["email"] = normalize_email(str(provider["email"]))
    if "status" in provider:
        validate_choice(provider["status"], PROVIDER_STATUSES, "status")
    if "tags" in provider:
        provider["tags"] = validate_tags(provider["tags"])

    if not partial:
        provider.setdefault("company", provider["name"])
        provider.setdefault("status", "active")
        provider.setdefault("tags", [])
    return provider


def list_providers(request: Request, app: "Application") -> ApiResult:
    """GET /api/providers"""
    filters = filters_from_query(request, app.providers.filter_fields)
    page = app.providers.find_all(filters)
    return ApiResult.ok(
        build_list_response(page.items, build_record_response),
        count=len(page.items),
        pagination=page.to_dict(),
    )


def get_provider(request: Request, app: "Application") -> ApiResult:
    """GET /api/providers/{id}"""
    provider = get_or_404(app.providers, path_id(request))
    return ApiResult.ok(build_record_response(provider))


def create_provider(request: Request, app: "Application") -> ApiResult:
    """POST /api/providers - name is required; company defaults to it."""
    claims = require_editor(request, app)
    provider = _clean_provider(request.json(), partial=False)
    provider["createdBy"] = claims.sub

    created = app.providers.create(provider)
    logger.info("Provider created", providerId=created["id"])
    return ApiResult.created(build_record_response(created), "Provider created successfully")


def update_provider(request: Request, app: "Application") -> ApiResult:
    """PUT/PATCH /api/providers/{id}"""
    require_editor(request, app)
    provider_id = path_id(request)
    updated = app.providers.update(provider_id, _clean_provider(request.json(), partial=True))
    if updated is None:
        raise not_found("Provider", provider_id)
    return ApiResult.ok(build_record_response(updated), "Provider updated successfully")


def delete_provider(request: Request, app: "Application") -> ApiResult:
    """DELETE /api/providers/{id}"""
    require_editor(request, app)
    provider_id = path_id(request)
    if not app.providers.delete(provider_id):
        raise not_found("Provider", provider_id)
    return ApiResult.ok(message="Provider deleted successfully", id=provider_id)


ROUTES = [
    ("GET", "/api/providers", list_providers),
    ("POST", "/api/providers", create_provider),
    ("GET", "/api/providers/{id}", get_provider),
    ("PUT", "/api/providers/{id}", update_provider),
    ("PATCH", "/api/providers/{id}", update_provider),
    ("DELETE", "/api/providers/{id}", delete_provider),
]
