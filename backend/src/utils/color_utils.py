"""
Colour conversion helpers used by the preview renderer.
"""

from typing import Optional, Tuple

_FALLBACK_RGB = (0, 0, 0)


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Parse "#rrggbb" or "#rgb" into an RGB tuple.

    Malformed input yields black rather than raising, so a bad colour in a
    stored template never breaks preview rendering.
    """
    s = (hex_color or "").strip().lstrip("#")
    if len(s) == 3:
        s = "".join(c * 2 for c in s)
    if len(s) != 6:
        return _FALLBACK_RGB
    try:
        return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
    except ValueError:
        return _FALLBACK_RGB


def format_number(value: float) -> str:
    """Format a number the way it reads in CSS: 50.0 -> "50", 0.25 -> "0.25"."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def hex_to_rgba(hex_color: str, opacity: Optional[float] = None) -> str:
    """Convert a hex colour and optional opacity into a CSS rgba() string."""
    r, g, b = hex_to_rgb(hex_color)
    alpha = 1.0 if opacity is None else max(0.0, min(1.0, opacity))
    return f"rgba({r}, {g}, {b}, {format_number(alpha)})"
