"""Logos repository.

One primary logo per client is a convention kept by demoting siblings
after a write. The demotion is not atomic: two concurrent writes can leave
two primaries until the next one.
"""

from typing import Any, Dict, List, Optional

from ..utils.logging import get_logger
from ..utils.validation import LOGO_STATUSES
from .base import EntityRepository

logger = get_logger(__name__)


class LogoRepository(EntityRepository):
    entity_name = "Logo"
    id_prefix = "logo"
    statuses = LOGO_STATUSES
    filter_fields = ("status", "category", "clientId", "brand", "variant")
    search_fields = ("name", "clientName", "brand", "description")

    def find_by_client(self, client_id: str) -> List[Dict[str, Any]]:
        return self.find_by_field("clientId", client_id)

    def demote_other_primaries(self, logo: Dict[str, Any]) -> int:
        """
        Clear `isPrimary` on every other logo of the same client.

        Returns:
            Number of logos demoted
        """
        client_id = logo.get("clientId")
        if not client_id:
            return 0
        demoted = 0
        for sibling in self.find_by_client(str(client_id)):
            if sibling.get("id") != logo.get("id") and sibling.get("isPrimary"):
                self.update(str(sibling["id"]), {"isPrimary": False})
                demoted += 1
        if demoted:
            logger.info(
                "Demoted primary logos", clientId=client_id, primaryId=logo.get("id"), count=demoted
            )
        return demoted

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        logo = super().create(data)
        if logo.get("isPrimary"):
            self.demote_other_primaries(logo)
        return logo

    def update(self, record_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        logo = super().update(record_id, data)
        if logo is not None and data.get("isPrimary"):
            self.demote_other_primaries(logo)
        return logo

    def set_primary(self, record_id: str) -> Optional[Dict[str, Any]]:
        return self.update(record_id, {"isPrimary": True})
