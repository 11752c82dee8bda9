"""Products repository."""

from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Attr

from ..utils.dynamodb import to_dynamodb
from ..utils.validation import PRODUCT_STATUSES
from .base import EntityRepository

LOW_STOCK_THRESHOLD = 10


class ProductRepository(EntityRepository):
    entity_name = "Product"
    id_prefix = "product"
    statuses = PRODUCT_STATUSES
    filter_fields = ("status", "category", "providerId", "currency")
    search_fields = ("name", "description", "sku")

    def find_by_sku(self, sku: str) -> Optional[Dict[str, Any]]:
        products = self.find_by_field("sku", sku)
        return products[0] if products else None

    def find_by_category(self, category: str) -> List[Dict[str, Any]]:
        return self.find_by_field("category", category)

    def find_by_provider(self, provider_id: str) -> List[Dict[str, Any]]:
        return self.find_by_field("providerId", provider_id)

    def find_by_price_range(self, min_price: float, max_price: float) -> List[Dict[str, Any]]:
        return self._scan_all(
            FilterExpression=Attr("price").between(to_dynamodb(min_price), to_dynamodb(max_price))
        )

    def find_low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> List[Dict[str, Any]]:
        return self._scan_all(FilterExpression=Attr("stock").lte(threshold))

    def update_stock(self, record_id: str, stock: int) -> Optional[Dict[str, Any]]:
        return self.update(record_id, {"stock": stock})

    def get_stats(self) -> Dict[str, int]:
        """
        Counts by status, plus low-stock products and distinct categories.

        `lowStock` and `categories` are not status buckets and do not add up
        to `total`.
        """
        items = self._scan_all(
            ProjectionExpression="#s, #c, #k",
            ExpressionAttributeNames={"#s": "status", "#c": "category", "#k": "stock"},
        )
        stats = self.count_by_status(items)
        stats["lowStock"] = sum(
            1
            for item in items
            if isinstance(item.get("stock"), (int, float)) and item["stock"] <= LOW_STOCK_THRESHOLD
        )
        stats["categories"] = len({item["category"] for item in items if item.get("category")})
        return stats
