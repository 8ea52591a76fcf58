"""
Unit tests for colour and datetime utilities.
"""

from datetime import datetime, timedelta, timezone

import pytest

from utils.color_utils import format_number, hex_to_rgb, hex_to_rgba
from utils.datetime_utils import ensure_utc, utc_now, utc_now_iso


class TestColorUtils:
    @pytest.mark.parametrize("value,expected", [
        ("#ff8000", (255, 128, 0)),
        ("#FFF", (255, 255, 255)),
        ("00ff00", (0, 255, 0)),
        ("#12", (0, 0, 0)),
        ("#zzzzzz", (0, 0, 0)),
        ("", (0, 0, 0)),
    ])
    def test_hex_to_rgb(self, value, expected):
        assert hex_to_rgb(value) == expected

    def test_hex_to_rgba_clamps_opacity(self):
        assert hex_to_rgba("#000000") == "rgba(0, 0, 0, 1)"
        assert hex_to_rgba("#000000", 0.25) == "rgba(0, 0, 0, 0.25)"
        assert hex_to_rgba("#000000", 3) == "rgba(0, 0, 0, 1)"

    @pytest.mark.parametrize("value,expected", [(50.0, "50"), (0.5, "0.5"), (12, "12"), (-3.25, "-3.25")])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected


class TestDatetimeUtils:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo == timezone.utc

    def test_utc_now_iso_parses_back(self):
        assert datetime.fromisoformat(utc_now_iso()).utcoffset() == timedelta(0)

    def test_ensure_utc(self):
        naive = datetime(2024, 1, 1, 12, 0)
        assert ensure_utc(naive) == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

        taipei = datetime(2024, 1, 1, 20, 0, tzinfo=timezone(timedelta(hours=8)))
        assert ensure_utc(taipei).hour == 12
        assert ensure_utc(None) is None
