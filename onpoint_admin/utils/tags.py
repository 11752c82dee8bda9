"""Tag normalization and badge color selection."""

import unicodedata
from typing import Any, Iterable, List, Mapping

# Tailwind classes for tag badges; index chosen by hashing the tag text
TAG_COLORS = [
    "bg-blue-100 text-blue-800 border-blue-200",
    "bg-green-100 text-green-800 border-green-200",
    "bg-purple-100 text-purple-800 border-purple-200",
    "bg-pink-100 text-pink-800 border-pink-200",
    "bg-yellow-100 text-yellow-800 border-yellow-200",
    "bg-indigo-100 text-indigo-800 border-indigo-200",
    "bg-red-100 text-red-800 border-red-200",
    "bg-orange-100 text-orange-800 border-orange-200",
    "bg-teal-100 text-teal-800 border-teal-200",
    "bg-cyan-100 text-cyan-800 border-cyan-200",
    "bg-emerald-100 text-emerald-800 border-emerald-200",
    "bg-violet-100 text-violet-800 border-violet-200",
    "bg-rose-100 text-rose-800 border-rose-200",
    "bg-amber-100 text-amber-800 border-amber-200",
    "bg-lime-100 text-lime-800 border-lime-200",
]


def normalize_tag(tag: str) -> str:
    """
    Normalize a tag: trimmed, lowercase, diacritics stripped.

    Examples:
        >>> normalize_tag("  Café ")
        'cafe'
    """
    decomposed = unicodedata.normalize("NFD", tag.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collect_tags(records: Iterable[Mapping[str, Any]]) -> List[str]:
    """
    Collect the distinct normalized tags of a set of records, sorted.

    Records without a `tags` list, and blank or non-string tags, are skipped.
    """
    unique = set()
    for record in records:
        tags = record.get("tags")
        if not isinstance(tags, (list, set, tuple)):
            continue
        for tag in tags:
            if isinstance(tag, str) and tag.strip():
                unique.add(normalize_tag(tag))
    return sorted(unique)


def _string_hash(text: str) -> int:
    """Signed 32-bit `h = h * 31 + c` string hash."""
    value = 0
    for ch in text:
        value = ((value << 5) - value + ord(ch)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def get_tag_color(tag: str) -> str:
    """Pick a deterministic badge color for a tag (case and padding insensitive)."""
    return TAG_COLORS[abs(_string_hash(tag.lower().strip())) % len(TAG_COLORS)]
