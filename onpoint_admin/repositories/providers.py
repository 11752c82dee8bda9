"""Providers repository."""

from typing import Any, Dict, List, Optional

from ..utils.tags import collect_tags
from ..utils.validation import PROVIDER_STATUSES
from .base import EntityRepository


class ProviderRepository(EntityRepository):
    entity_name = "Provider"
    id_prefix = "provider"
    statuses = PROVIDER_STATUSES
    filter_fields = ("status", "company", "industry")
    search_fields = ("name", "company", "email", "contactPerson")

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        providers = self.find_by_field("email", email)
        return providers[0] if providers else None

    def find_by_company(self, company: str) -> List[Dict[str, Any]]:
        return self.find_by_field("company", company)

    def find_by_status(self, status: str) -> List[Dict[str, Any]]:
        return self.find_by_field("status", status)

    def all_tags(self) -> List[str]:
        """Distinct normalized tags across every provider, sorted."""
        items = self._scan_all(ProjectionExpression="#t", ExpressionAttributeNames={"#t": "tags"})
        return collect_tags(items)
