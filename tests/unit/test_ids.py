"""Tests for ID and timestamp generation."""

import re
from datetime import datetime

from onpoint_admin.utils.ids import generate_id, utc_now_iso

ID_PATTERN = re.compile(r"^product_\d{13}_[0-9a-z]{9}$")


class TestGenerateId:
    def test_format(self) -> None:
        assert ID_PATTERN.match(generate_id("product"))

    def test_embeds_given_time(self) -> None:
        record_id = generate_id("logo", 1734566400000)

        assert record_id.startswith("logo_1734566400000_")
        assert len(record_id.rsplit("_", 1)[1]) == 9

    def test_unique(self) -> None:
        ids = {generate_id("user", 1734566400000) for _ in range(200)}

        assert len(ids) == 200


class TestUtcNowIso:
    def test_utc_with_milliseconds(self) -> None:
        stamp = utc_now_iso()

        assert stamp.endswith("+00:00")
        assert re.search(r"\.\d{3}\+00:00$", stamp)
        assert datetime.fromisoformat(stamp).tzinfo is not None

    def test_lexically_ordered(self) -> None:
        first = utc_now_iso()
        second = utc_now_iso()

        assert second >= first
