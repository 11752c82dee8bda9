"""Users repository: lookup by email (GSI), role/status helpers, password hashing."""

from typing import Any, Dict, List, Optional

from boto3.dynamodb.conditions import Key

from ..utils.auth import hash_password
from ..utils.dynamodb import from_dynamodb
from ..utils.errors import AppError, ErrorCode
from ..utils.ids import utc_now_iso
from ..utils.validation import USER_STATUSES, normalize_email
from .base import EntityRepository

EMAIL_INDEX = "email-index"


class UserRepository(EntityRepository):
    entity_name = "User"
    id_prefix = "user"
    statuses = USER_STATUSES
    filter_fields = ("status", "role", "department")
    search_fields = ("email", "firstName", "lastName")

    @staticmethod
    def public_user(item: Dict[str, Any]) -> Dict[str, Any]:
        """The user record without its password hash."""
        return {key: value for key, value in item.items() if key != "password"}

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """
        Look up a user by email through the email GSI.

        Returns:
            The stored user (including password hash) or None
        """
        response = self.table.query(
            IndexName=EMAIL_INDEX,
            KeyConditionExpression=Key("email").eq(email.strip().lower()),
            Limit=1,
        )
        items = response.get("Items", [])
        return from_dynamodb(items[0]) if items else None

    def find_by_role(self, role: str) -> List[Dict[str, Any]]:
        return self.find_by_field("role", role)

    def find_by_status(self, status: str) -> List[Dict[str, Any]]:
        return self.find_by_field("status", status)

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a user with a unique email and hashed password.

        Raises:
            AppError: ALREADY_EXISTS when the email is taken
        """
        email = normalize_email(str(data.get("email", "")))
        if self.find_by_email(email) is not None:
            raise AppError(
                ErrorCode.ALREADY_EXISTS, "A user with this email already exists", {"email": email}
            )

        record = {**data, "email": email}
        if record.get("password"):
            record["password"] = hash_password(str(record["password"]))
        return super().create(record)

    def update(self, record_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update a user, re-hashing a new password and keeping emails unique.

        Raises:
            AppError: ALREADY_EXISTS when changing to another user's email
        """
        changes = dict(data)
        if changes.get("email"):
            email = normalize_email(str(changes["email"]))
            existing = self.find_by_email(email)
            if existing is not None and existing.get("id") != record_id:
                raise AppError(
                    ErrorCode.ALREADY_EXISTS,
                    "A user with this email already exists",
                    {"email": email},
                )
            changes["email"] = email
        if changes.get("password"):
            changes["password"] = hash_password(str(changes["password"]))
        else:
            changes.pop("password", None)
        return super().update(record_id, changes)

    def update_last_login(self, record_id: str) -> Optional[Dict[str, Any]]:
        return super().update(record_id, {"lastLogin": utc_now_iso()})
