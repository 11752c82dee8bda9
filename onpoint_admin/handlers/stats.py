"""
Dashboard statistics.

The three per-table counts are read concurrently; each reflects its own
table at the moment of its own scan, with no consistency across them.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Dict

from ..utils.api_types import Request
from ..utils.ids import utc_now_iso
from ..utils.logging import get_logger
from ..utils.responses import ApiResult

if TYPE_CHECKING:
    from ..app import Application

logger = get_logger(__name__)


def collect_stats(app: "Application") -> Dict[str, Any]:
    """Users, providers and products stats plus an overview of totals."""
    with ThreadPoolExecutor(max_workers=3) as executor:
        users_future = executor.submit(app.users.get_stats)
        providers_future = executor.submit(app.providers.get_stats)
        products_future = executor.submit(app.products.get_stats)
        users = users_future.result()
        providers = providers_future.result()
        products = products_future.result()

    return {
        "users": users,
        "providers": providers,
        "products": products,
        "overview": {
            "totalUsers": users["total"],
            "totalProviders": providers["total"],
            "totalProducts": products["total"],
            "totalActiveUsers": users["active"],
            "totalActiveProviders": providers["active"],
            "totalActiveProducts": products["active"],
        },
    }


def get_stats(request: Request, app: "Application") -> ApiResult:
    """GET /api/stats"""
    stats = collect_stats(app)
    logger.info("Stats collected", **stats["overview"])
    return ApiResult.ok(stats, timestamp=utc_now_iso())


ROUTES = [
    ("GET", "/api/stats", get_stats),
    ("GET", "/api/simple-dynamodb/stats", get_stats),
]
