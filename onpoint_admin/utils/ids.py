"""
ID and timestamp generation for stored records.

IDs follow the `<prefix>_<epoch-ms>_<random>` shape used across the
catalog tables, e.g. `product_1734566400000_k3j9x2m1q`.
"""

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Optional

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def generate_id(prefix: str, now_ms: Optional[int] = None) -> str:
    """
    Generate a unique record identifier.

    Args:
        prefix: Entity prefix without separator (e.g., 'product', 'logo')
        now_ms: Epoch milliseconds to embed (defaults to the current time)

    Returns:
        Identifier like 'product_1734566400000_k3j9x2m1q'

    Examples:
        >>> generate_id('product', 1734566400000).startswith('product_1734566400000_')
        True
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{prefix}_{now_ms}_{suffix}"


def utc_now_iso() -> str:
    """Current UTC time as a fixed-width ISO-8601 string (millisecond precision)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")
