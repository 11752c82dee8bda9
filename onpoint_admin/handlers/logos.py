"""Logo route handlers."""

from typing import TYPE_CHECKING, Any, Dict

from ..utils.api_types import Request
from ..utils.ids import generate_id
from ..utils.logging import get_logger
from ..utils.responses import ApiResult, build_list_response, build_record_response, not_found
from ..utils.validation import (
    LOGO_STATUSES,
    parse_bool,
    require_fields,
    validate_choice,
    validate_number,
    validate_tags,
)
from .common import filters_from_query, get_or_404, path_id, pick, require_editor

if TYPE_CHECKING:
    from ..app import Application

logger = get_logger(__name__)

LOGO_FIELDS = (
    "name",
    "description",
    "category",
    "clientId",
    "clientName",
    "variant",
    "brand",
    "version",
    "fileUrl",
    "fileType",
    "fileSize",
    "thumbnailUrl",
    "tags",
    "status",
    "isPrimary",
    "downloadCount",
    "metadata",
)
REQUIRED_LOGO_FIELDS = ("name", "category", "fileUrl", "clientName")


def _clean_logo(data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    if not partial:
        require_fields(data, REQUIRED_LOGO_FIELDS)

    logo = pick(data, LOGO_FIELDS)
    present_required = [field for field in REQUIRED_LOGO_FIELDS if field in logo]
    require_fields(logo, present_required)

    if "isPrimary" in logo:
        logo["isPrimary"] = parse_bool(logo["isPrimary"])
    if "status" in logo:
        validate_choice(logo["status"], LOGO_STATUSES, "status")
    if "tags" in logo:
        logo["tags"] = validate_tags(logo["tags"])
    for field in ("fileSize", "downloadCount"):
        if field in logo:
            logo[field] = int(validate_number(logo[field], field))

    if not partial:
        logo.setdefault("clientId", generate_id("client"))
        logo.setdefault("description", "")
        logo.setdefault("fileType", "unknown")
        logo.setdefault("fileSize", 0)
        logo.setdefault("variant", "")
        logo.setdefault("brand", "")
        logo.setdefault("version", "")
        logo.setdefault("tags", [])
        logo.setdefault("status", "active")
        logo.setdefault("isPrimary", False)
        logo.setdefault("downloadCount", 0)
    return logo


def list_logos(request: Request, app: "Application") -> ApiResult:
    """GET /api/logos"""
    filters = filters_from_query(request, app.logos.filter_fields)
    page = app.logos.find_all(filters)
    return ApiResult.ok(
        build_list_response(page.items, build_record_response),
        count=len(page.items),
        pagination=page.to_dict(),
    )


def get_logo(request: Request, app: "Application") -> ApiResult:
    """GET /api/logos/{id}"""
    logo = get_or_404(app.logos, path_id(request))
    return ApiResult.ok(build_record_response(logo))


def create_logo(request: Request, app: "Application") -> ApiResult:
    """
    POST /api/logos - name, category, fileUrl and clientName are required.

    A primary logo demotes the client's previous primary.
    """
    claims = require_editor(request, app)
    logo = _clean_logo(request.json(), partial=False)
    logo["createdBy"] = claims.sub

    created = app.logos.create(logo)
    logger.info(
        "Logo created",
        logoId=created["id"],
        clientId=created.get("clientId"),
        isPrimary=created.get("isPrimary"),
    )
    return ApiResult.created(build_record_response(created), "Logo created successfully")


def update_logo(request: Request, app: "Application") -> ApiResult:
    """PUT/PATCH /api/logos/{id}"""
    require_editor(request, app)
    logo_id = path_id(request)
    updated = app.logos.update(logo_id, _clean_logo(request.json(), partial=True))
    if updated is None:
        raise not_found("Logo", logo_id)
    return ApiResult.ok(build_record_response(updated), "Logo updated successfully")


def delete_logo(request: Request, app: "Application") -> ApiResult:
    """DELETE /api/logos/{id}"""
    require_editor(request, app)
    logo_id = path_id(request)
    if not app.logos.delete(logo_id):
        raise not_found("Logo", logo_id)
    return ApiResult.ok(message="Logo deleted successfully", id=logo_id)


ROUTES = [
    ("GET", "/api/logos", list_logos),
    ("POST", "/api/logos", create_logo),
    ("GET", "/api/logos/{id}", get_logo),
    ("PUT", "/api/logos/{id}", update_logo),
    ("PATCH", "/api/logos/{id}", update_logo),
    ("DELETE", "/api/logos/{id}", delete_logo),
]
