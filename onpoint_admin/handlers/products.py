"""
Product route handlers.

Handles the product catalog CRUD routes and the `simple-dynamodb` routes,
which store request bodies as-is.
"""

from typing import TYPE_CHECKING, Any, Dict

from ..utils.api_types import Request
from ..utils.logging import get_logger
from ..utils.responses import ApiResult, build_list_response, build_record_response, not_found
from ..utils.validation import (
    PRODUCT_STATUSES,
    require_fields,
    validate_choice,
    validate_number,
    validate_tags,
)
from .common import filters_from_query, get_or_404, path_id, pick, require_editor

if TYPE_CHECKING:
    from ..app import Application

logger = get_logger(__name__)

PRODUCT_FIELDS = (
    "name",
    "description",
    "category",
    "sku",
    "price",
    "currency",
    "stock",
    "status",
    "tags",
    "providerId",
    "images",
    "specifications",
)


def _clean_product(data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    """
    Validate and normalize product fields.

    Args:
        data: Request body
        partial: True for updates (only present fields are checked)

    Raises:
        AppError: If validation fails
    """
    if not partial:
        require_fields(data, ("name", "category", "price"))

    product = pick(data, PRODUCT_FIELDS)
    for field in ("name", "category"):
        if field in product:
            require_fields(product, (field,))
            product[field] = str(product[field]).strip()

    if "price" in product:
        product["price"] = validate_number(product["price"], "price")
    if "stock" in product:
        product["stock"] = int(validate_number(product["stock"], "stock"))
    if "status" in product:
        validate_choice(product["status"], PRODUCT_STATUSES, "status")
    if "tags" in product:
        product["tags"] = validate_tags(product["tags"])
    if "currency" in product and product["currency"]:
        product["currency"] = str(product["currency"]).upper()

    if not partial:
        product.setdefault("description", "")
        product.setdefault("currency", "USD")
        product.setdefault("stock", 0)
        product.setdefault("status", "active")
        product.setdefault("tags", [])
    return product


def list_products(request: Request, app: "Application") -> ApiResult:
    """GET /api/products - list products with optional filters and paging."""
    filters = filters_from_query(request, app.products.filter_fields)
    page = app.products.find_all(filters)
    return ApiResult.ok(
        build_list_response(page.items, build_record_response),
        count=len(page.items),
        pagination=page.to_dict(),
    )


def get_product(request: Request, app: "Application") -> ApiResult:
    """GET /api/products/{id}"""
    product = get_or_404(app.products, path_id(request))
    return ApiResult.ok(build_record_response(product))


def create_product(request: Request, app: "Application") -> ApiResult:
    """POST /api/products - name, category and price are required."""
    claims = require_editor(request, app)
    product = _clean_product(request.json(), partial=False)
    product["createdBy"] = claims.sub

    created = app.products.create(product)
    logger.info("Product created", productId=created["id"], category=created.get("category"))
    return ApiResult.created(build_record_response(created), "Product created successfully")


def update_product(request: Request, app: "Application") -> ApiResult:
    """PUT/PATCH /api/products/{id} - partial update of known fields."""
    require_editor(request, app)
    product_id = path_id(request)
    changes = _clean_product(request.json(), partial=True)

    updated = app.products.update(product_id, changes)
    if updated is None:
        raise not_found("Product", product_id)
    return ApiResult.ok(build_record_response(updated), "Product updated successfully")


def delete_product(request: Request, app: "Application") -> ApiResult:
    """DELETE /api/products/{id}"""
    require_editor(request, app)
    product_id = path_id(request)
    if not app.products.delete(product_id):
        raise not_found("Product", product_id)
    return ApiResult.ok(message="Product deleted successfully", id=product_id)


def simple_list_products(request: Request, app: "Application") -> ApiResult:
    """GET /api/simple-dynamodb/products - every stored product, unfiltered."""
    items = app.products.find_all().items
    return ApiResult.ok(items, count=len(items))


def simple_create_product(request: Request, app: "Application") -> ApiResult:
    """
    POST /api/simple-dynamodb/products - store the body as-is.

    Only an id (when missing) and createdAt/updatedAt are added.
    """
    created = app.products.create(request.json())
    return ApiResult.created(created, "Product created successfully")


ROUTES = [
    ("GET", "/api/products", list_products),
    ("POST", "/api/products", create_product),
    ("GET", "/api/products/{id}", get_product),
    ("PUT", "/api/products/{id}", update_product),
    ("PATCH", "/api/products/{id}", update_product),
    ("DELETE", "/api/products/{id}", delete_product),
    ("GET", "/api/simple-dynamodb/products", simple_list_products),
    ("POST", "/api/simple-dynamodb/products", simple_create_product),
]
