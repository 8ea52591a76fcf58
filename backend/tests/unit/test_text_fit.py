"""
Unit tests for text auto-fit.

Most tests use a deterministic measurer: every character is ``0.5 * size``
wide, lines wrap greedily on character count, and each line is
``size * line_height`` tall.
"""

import math

import pytest

from editor.text_fit import (
    PillowTextMeasurer,
    TextStyle,
    apply_text_transform,
    compute_font_size,
    fit_font_size,
    split_alternate_segments,
)
from shared_types.template import TextLayer


class FakeMeasurer:
    def __init__(self):
        self.calls = []

    def measure_height(self, text, style, font_size, max_width):
        self.calls.append(font_size)
        if not text:
            return 0.0
        chars_per_line = max(1, int(max_width // (0.5 * font_size)))
        lines = sum(max(1, math.ceil(len(p) / chars_per_line)) for p in text.split("\n"))
        return lines * font_size * style.line_height


STYLE = TextStyle(family="Arial", line_height=1.0)


def _text_layer(**overrides) -> TextLayer:
    data = {
        "id": "t1",
        "type": "text",
        "name": "Text",
        "position": {"x": 0, "y": 0},
        "size": {"width": 400, "height": 100},
        "zIndex": 0,
        "text": "Hello world",
        "font": {"family": "Arial", "size": 48},
        "color": "#000",
        "lineHeight": 1.0,
        "textBox": {
            "enabled": True,
            "maxWidth": 400,
            "maxHeight": 100,
            "overflow": "shrink",
            "minFontSize": 10,
        },
    }
    data.update(overrides)
    return TextLayer.model_validate(data)


class TestFitFontSize:
    """Test the binary search itself."""

    def test_comfortable_box_returns_requested_size(self):
        size = fit_font_size("Hi", STYLE, 40, 1000, 1000, 12, FakeMeasurer())
        assert size == 40

    def test_tiny_box_returns_minimum(self):
        size = fit_font_size("A long sentence that cannot fit", STYLE, 40, 10, 5, 12, FakeMeasurer())
        assert size == 12

    def test_finds_largest_fitting_size(self):
        # One line of 10 chars fits at width 100 only while size <= 20; height allows up to 30
        measurer = FakeMeasurer()
        size = fit_font_size("abcdefghij", STYLE, 60, 100, 30, 8, measurer)

        assert size == 20
        assert measurer.measure_height("abcdefghij", STYLE, size, 100) <= 30
        assert measurer.measure_height("abcdefghij", STYLE, size + 1, 100) > 30

    def test_measurement_count_is_logarithmic(self):
        measurer = FakeMeasurer()
        fit_font_size("abc", STYLE, 1000, 50, 50, 1, measurer)
        assert len(measurer.calls) <= math.ceil(math.log2(1000)) + 1

    def test_minimum_above_requested_returns_minimum(self):
        assert fit_font_size("abc", STYLE, 10, 1000, 1000, 14, FakeMeasurer()) == 14


class TestComputeFontSize:
    """Test font size selection for text layers."""

    def test_without_text_box_uses_font_size(self):
        layer = _text_layer(textBox=None)
        assert compute_font_size(layer, FakeMeasurer()) == 48

    def test_non_shrink_overflow_uses_font_size(self):
        layer = _text_layer(textBox={"enabled": True, "maxWidth": 10, "maxHeight": 10, "overflow": "wrap"})
        assert compute_font_size(layer, FakeMeasurer()) == 48

    def test_disabled_text_box_uses_font_size(self):
        layer = _text_layer(textBox={"enabled": False, "maxWidth": 10, "maxHeight": 10, "overflow": "shrink"})
        assert compute_font_size(layer, FakeMeasurer()) == 48

    def test_shrink_fits_inside_padding(self):
        layer = _text_layer(
            text="abcdefghij",
            textBox={
                "enabled": True,
                "maxWidth": 120,
                "maxHeight": 50,
                "overflow": "shrink",
                "minFontSize": 8,
                "padding": {"top": 10, "right": 10, "bottom": 10, "left": 10},
            },
        )
        # Inner box is 100 x 30, same as the direct search above
        assert compute_font_size(layer, FakeMeasurer()) == 20

    def test_default_minimum_is_twelve(self):
        layer = _text_layer(
            text="x" * 200,
            textBox={"enabled": True, "maxWidth": 20, "maxHeight": 5, "overflow": "shrink"},
        )
        assert compute_font_size(layer, FakeMeasurer()) == 12


class TestTextHelpers:
    """Test text transform and alternate-style splitting."""

    @pytest.mark.parametrize("transform,expected", [
        ("uppercase", "HELLO WORLD"),
        ("lowercase", "hello world"),
        ("capitalize", "Hello World"),
        ("none", "hello World"),
        (None, "hello World"),
    ])
    def test_apply_text_transform(self, transform, expected):
        assert apply_text_transform("hello World", transform) == expected

    def test_split_alternate_segments(self):
        assert split_alternate_segments("Buy ~now~ and ~save~!") == [
            ("Buy ", False),
            ("now", True),
            (" and ", False),
            ("save", True),
            ("!", False),
        ]

    def test_unpaired_separator_is_plain_text(self):
        assert split_alternate_segments("50~ off") == [("50~ off", False)]

    def test_custom_separator(self):
        assert split_alternate_segments("a **b** c", "**") == [("a ", False), ("b", True), (" c", False)]


class TestPillowTextMeasurer:
    """Smoke tests for Pillow-backed measurement."""

    def test_empty_text_has_no_height(self):
        assert PillowTextMeasurer(font_dirs=[]).measure_height("", STYLE, 20, 100) == 0

    def test_height_is_lines_times_line_height(self):
        measurer = PillowTextMeasurer(font_dirs=[])
        style = TextStyle(family="Arial", line_height=1.5)
        assert measurer.measure_height("one\ntwo", style, 20, 10000) == 2 * 20 * 1.5

    def test_narrow_box_wraps_more(self):
        measurer = PillowTextMeasurer(font_dirs=[])
        text = "the quick brown fox jumps over the lazy dog"
        wide = measurer.wrap(text, STYLE, 20, 10000)
        narrow = measurer.wrap(text, STYLE, 20, 60)
        assert len(wide) == 1
        assert len(narrow) > 1

    def test_fit_with_pillow_shrinks_long_text(self):
        layer = _text_layer(
            text="A fairly long headline that needs to shrink to fit",
            font={"family": "Arial", "size": 120},
            textBox={"enabled": True, "maxWidth": 300, "maxHeight": 80, "overflow": "shrink", "minFontSize": 8},
        )
        size = compute_font_size(layer, PillowTextMeasurer(font_dirs=[]))
        assert 8 <= size < 120
