"""
Input validation utilities.

Validates request payloads: required fields, enumerations, emails, numbers.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from .errors import AppError, ErrorCode

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

USER_ROLES = ("admin", "ejecutivo", "cliente")
USER_STATUSES = ("active", "pending", "inactive")
PRODUCT_STATUSES = ("active", "inactive", "draft", "archived")
PROVIDER_STATUSES = ("active", "inactive", "pending")
LOGO_STATUSES = ("active", "inactive", "draft", "archived")


def is_blank(value: Any) -> bool:
    """True for None, empty containers and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple, set)):
        return not value
    return False


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    """
    Require every field to be present and non-blank.

    Raises:
        AppError: INVALID_INPUT listing the missing fields
    """
    missing_fields: List[str] = [field for field in fields if is_blank(data.get(field))]
    if missing_fields:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"Missing required fields: {', '.join(missing_fields)}",
            {"missingFields": missing_fields},
        )


def validate_choice(value: Optional[str], allowed: Iterable[str], field: str) -> None:
    """Reject a value outside an enumeration (None passes)."""
    allowed = tuple(allowed)
    if value is not None and value not in allowed:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"{field} must be one of: {', '.join(allowed)}",
            {"field": field, "value": value},
        )


def normalize_email(email: str) -> str:
    """
    Normalize an email to lowercase without padding.

    Raises:
        AppError: If the email is not well formed
    """
    normalized = email.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise AppError(ErrorCode.INVALID_INPUT, "Email address is not valid", {"email": email})
    return normalized


def validate_number(value: Any, field: str, minimum: Optional[int] = 0) -> Decimal:
    """
    Parse a non-negative number for storage.

    Raises:
        AppError: If the value is not numeric or below the minimum
    """
    if isinstance(value, bool):
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be a number", {"field": field})
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be a number", {"field": field})
    if not number.is_finite():
        raise AppError(ErrorCode.INVALID_INPUT, f"{field} must be a number", {"field": field})
    if minimum is not None and number < minimum:
        raise AppError(
            ErrorCode.INVALID_INPUT,
            f"{field} must be greater than or equal to {minimum}",
            {"field": field},
        )
    return number


def parse_bool(value: Any) -> bool:
    """Accept real booleans and their common string spellings."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def validate_tags(value: Any) -> List[str]:
    """Tags must be a list of strings; blanks are dropped, text kept as given."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise AppError(ErrorCode.INVALID_INPUT, "tags must be a list of strings", {"field": "tags"})
    return [tag.strip() for tag in value if tag.strip()]
