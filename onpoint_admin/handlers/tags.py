"""Provider tag listing."""

from typing import TYPE_CHECKING

from ..utils.api_types import Request
from ..utils.responses import ApiResult
from ..utils.tags import get_tag_color
from ..utils.validation import parse_bool

if TYPE_CHECKING:
    from ..app import Application


def list_tags(request: Request, app: "Application") -> ApiResult:
    """
    GET /api/tags - distinct normalized provider tags, sorted.

    `?colors=true` adds the badge color class of each tag.
    """
    tags = app.providers.all_tags()
    if parse_bool(request.query.get("colors", "")):
        return ApiResult.ok(tags=tags, colors={tag: get_tag_color(tag) for tag in tags})
    return ApiResult.ok(tags=tags)


ROUTES = [
    ("GET", "/api/tags", list_tags),
]
