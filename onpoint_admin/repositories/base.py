"""
Base repository for single-table entities keyed by `id`.

Translates filter dicts into scan parameters, marshals records to and from
DynamoDB's representation and computes per-status counts. Every call is a
live round trip; nothing is cached.
"""

from dataclasses import dataclass
from functools import reduce
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from boto3.dynamodb.conditions import Attr, ConditionBase
from botocore.exceptions import BotoCoreError, ClientError

from ..utils.dynamodb import from_dynamodb, to_dynamodb
from ..utils.ids import generate_id, utc_now_iso
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from mypy_boto3_dynamodb.service_resource import Table

logger = get_logger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


@dataclass
class Page:
    """One page of matching records plus the total match count."""

    items: List[Dict[str, Any]]
    total_count: int
    page: int = 1
    limit: Optional[int] = None

    @property
    def total_pages(self) -> int:
        if not self.limit:
            return 1 if self.total_count else 0
        return (self.total_count + self.limit - 1) // self.limit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total_count,
            "totalPages": self.total_pages,
        }


class EntityRepository:
    """CRUD and statistics for one entity table."""

    entity_name = "Record"
    id_prefix = "item"
    statuses: Tuple[str, ...] = ()
    # Filters matched by equality in the scan FilterExpression
    filter_fields: Tuple[str, ...] = ("status",)
    # Fields searched (case-insensitive substring) by the `search` filter
    search_fields: Tuple[str, ...] = ("name",)
    # Never overwritten by update()
    protected_fields: Tuple[str, ...] = ("id", "createdAt")

    def __init__(self, table: "Table") -> None:
        self.table = table

    @property
    def table_name(self) -> str:
        return str(self.table.name)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def _scan_all(self, **scan_kwargs: Any) -> List[Dict[str, Any]]:
        """Scan the whole table, following LastEvaluatedKey."""
        items: List[Dict[str, Any]] = []
        while True:
            response = self.table.scan(**scan_kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            scan_kwargs["ExclusiveStartKey"] = last_key
        return [from_dynamodb(item) for item in items]

    def _build_filter(self, filters: Dict[str, Any]) -> Optional[ConditionBase]:
        conditions: List[ConditionBase] = [
            Attr(field).eq(filters[field])
            for field in self.filter_fields
            if filters.get(field) not in (None, "")
        ]
        if filters.get("tag"):
            conditions.append(Attr("tags").contains(filters["tag"]))
        if not conditions:
            return None
        return reduce(lambda left, right: left & right, conditions)

    def _matches_search(self, item: Dict[str, Any], search: str) -> bool:
        needle = search.strip().lower()
        return any(needle in str(item.get(field, "")).lower() for field in self.search_fields)

    def find_all(self, filters: Optional[Dict[str, Any]] = None) -> Page:
        """
        List records matching the filters.

        Args:
            filters: Optional equality filters (see `filter_fields`), plus
                `tag`, `search`, `page` and `limit`

        Returns:
            Page of records; total_count counts every match
        """
        filters = dict(filters or {})
        scan_kwargs: Dict[str, Any] = {}
        condition = self._build_filter(filters)
        if condition is not None:
            scan_kwargs["FilterExpression"] = condition

        items = self._scan_all(**scan_kwargs)

        search = filters.get("search")
        if search:
            items = [item for item in items if self._matches_search(item, search)]

        items.sort(key=lambda item: str(item.get("createdAt", "")), reverse=True)

        page = max(int(filters.get("page") or 1), 1)
        limit = int(filters["limit"]) if filters.get("limit") else None
        if limit:
            offset = (page - 1) * limit
            page_items = items[offset : offset + limit]
        else:
            page_items = items

        logger.debug(
            "Listed records", table=self.table_name, matched=len(items), returned=len(page_items)
        )
        return Page(items=page_items, total_count=len(items), page=page, limit=limit)

    def find_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Get a record by id, or None if it does not exist."""
        response = self.table.get_item(Key={"id": record_id})
        item = response.get("Item")
        return from_dynamodb(item) if item else None

    def find_by_field(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """All records whose `field` equals `value`."""
        return self._scan_all(FilterExpression=Attr(field).eq(to_dynamodb(value)))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a new record.

        Generates `id` when missing and stamps equal createdAt/updatedAt.
        """
        now = utc_now_iso()
        item = {
            **data,
            "id": data.get("id") or generate_id(self.id_prefix),
            "createdAt": now,
            "updatedAt": now,
        }
        self.table.put_item(Item=to_dynamodb(item))
        logger.info("Created record", table=self.table_name, id=item["id"])
        return from_dynamodb(item)

    def update(self, record_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply a partial update.

        `id` and `createdAt` are never changed and None values are skipped.
        updatedAt is always refreshed.

        Returns:
            The updated record, or None if the record does not exist
        """
        changes = {
            key: value
            for key, value in data.items()
            if key not in self.protected_fields and key != "updatedAt" and value is not None
        }
        changes["updatedAt"] = utc_now_iso()

        names: Dict[str, str] = {}
        values: Dict[str, Any] = {}
        assignments: List[str] = []
        for index, (key, value) in enumerate(changes.items()):
            names[f"#f{index}"] = key
            values[f":v{index}"] = to_dynamodb(value)
            assignments.append(f"#f{index} = :v{index}")

        try:
            response = self.table.update_item(
                Key={"id": record_id},
                UpdateExpression="SET " + ", ".join(assignments),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ConditionExpression="attribute_exists(id)",
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == CONDITIONAL_CHECK_FAILED:
                return None
            raise

        logger.info(
            "Updated record", table=self.table_name, id=record_id, fields=sorted(changes)
        )
        return from_dynamodb(response["Attributes"])

    def delete(self, record_id: str) -> bool:
        """Delete a record; False if it did not exist."""
        try:
            self.table.delete_item(
                Key={"id": record_id}, ConditionExpression="attribute_exists(id)"
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == CONDITIONAL_CHECK_FAILED:
                return False
            raise
        logger.info("Deleted record", table=self.table_name, id=record_id)
        return True

    def update_status(self, record_id: str, status: str) -> Optional[Dict[str, Any]]:
        return self.update(record_id, {"status": status})

    # ------------------------------------------------------------------
    # Statistics and health
    # ------------------------------------------------------------------
    def count_by_status(self, items: Iterable[Dict[str, Any]]) -> Dict[str, int]:
        """
        Count records per status.

        Unknown or missing statuses land in `other`, so `total` always
        equals the sum of the buckets.
        """
        counts = {status: 0 for status in self.statuses}
        counts["other"] = 0
        total = 0
        for item in items:
            total += 1
            status = item.get("status")
            if status in counts and status != "other":
                counts[status] += 1
            else:
                counts["other"] += 1
        return {"total": total, **counts}

    def get_stats(self) -> Dict[str, int]:
        """Counts by status for the whole table."""
        items = self._scan_all(
            ProjectionExpression="#s", ExpressionAttributeNames={"#s": "status"}
        )
        return self.count_by_status(items)

    def test_connection(self) -> bool:
        """Check that the table is reachable with a one-item scan."""
        try:
            self.table.scan(Limit=1)
            return True
        except (ClientError, BotoCoreError) as e:
            logger.error("Error connecting to table", table=self.table_name, error=str(e))
            return False
