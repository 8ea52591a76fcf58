"""
Text auto-fit.

Finds the largest font size at which a text layer's wrapped text fits its
text box, by binary search over integer sizes. Measuring text needs a real
layout engine, so the measurer is injected: ``PillowTextMeasurer`` lays
text out with Pillow fonts, tests use a deterministic fake.
"""

import logging
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Protocol, Tuple, Union

from PIL import ImageFont

from core.config import FONT_DIRS
from core.constants import DEFAULT_ALTERNATE_SEPARATOR, DEFAULT_LINE_HEIGHT, DEFAULT_MIN_FONT_SIZE
from shared_types.template import TextLayer

logger = logging.getLogger(__name__)

# Probed after FONT_DIRS when a family has no file of its own
FALLBACK_FONT_PATHS = [
    "assets/fonts/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    "C:\\Windows\\Fonts\\arial.ttf",
]

SYSTEM_FONT_DIRS = [
    "/usr/share/fonts/truetype",
    "/usr/share/fonts",
    "/System/Library/Fonts/Supplemental",
    "/Library/Fonts",
    "C:\\Windows\\Fonts",
]


@dataclass(frozen=True)
class TextStyle:
    """Font and layout settings that affect measured height, minus the size."""
    family: str
    weight: Union[int, str, None] = None
    style: Optional[str] = None
    line_height: float = DEFAULT_LINE_HEIGHT
    letter_spacing: float = 0.0
    text_transform: Optional[str] = None

    @classmethod
    def from_layer(cls, layer: TextLayer) -> "TextStyle":
        return cls(
            family=layer.font.family,
            weight=layer.font.weight,
            style=layer.font.style,
            line_height=layer.line_height or DEFAULT_LINE_HEIGHT,
            letter_spacing=layer.letter_spacing or 0.0,
            text_transform=layer.text_transform,
        )

    @property
    def is_bold(self) -> bool:
        if isinstance(self.weight, int):
            return self.weight >= 600
        if isinstance(self.weight, str):
            return self.weight == "bold" or (self.weight.isdigit() and int(self.weight) >= 600)
        return False


class TextMeasurer(Protocol):
    def measure_height(self, text: str, style: TextStyle, font_size: int, max_width: float) -> float:
        """Height of ``text`` laid out at ``font_size`` and wrapped to ``max_width``."""
        ...


def fit_font_size(
    text: str,
    style: TextStyle,
    requested_size: float,
    max_width: float,
    max_height: float,
    min_font_size: float,
    measurer: TextMeasurer,
) -> int:
    """
    Largest integer size in [min_font_size, requested_size] whose measured
    height is at most ``max_height``.

    Falls back to ``min_font_size`` when nothing fits, so the result is
    never below the floor. Takes O(log(range)) measurements.
    """
    low = int(math.ceil(min_font_size))
    high = int(math.floor(requested_size))
    best = low

    while low <= high:
        mid = (low + high) // 2
        if measurer.measure_height(text, style, mid, max_width) <= max_height:
            best = mid
            low = mid + 1
        else:
            high = mid - 1

    return best


def compute_font_size(layer: TextLayer, measurer: TextMeasurer) -> float:
    """Font size a text layer renders at: auto-fitted when its box shrinks overflow, else as set."""
    box = layer.text_box
    if box is None or not box.enabled or box.overflow != "shrink":
        return layer.font.size

    padding = box.padding
    pad_x = (padding.left + padding.right) if padding else 0
    pad_y = (padding.top + padding.bottom) if padding else 0

    return fit_font_size(
        layer.text,
        TextStyle.from_layer(layer),
        requested_size=layer.font.size,
        max_width=max(0.0, box.max_width - pad_x),
        max_height=max(0.0, box.max_height - pad_y),
        min_font_size=box.min_font_size or DEFAULT_MIN_FONT_SIZE,
        measurer=measurer,
    )


def apply_text_transform(text: str, transform: Optional[str]) -> str:
    if transform == "uppercase":
        return text.upper()
    if transform == "lowercase":
        return text.lower()
    if transform == "capitalize":
        # CSS capitalize only touches the first letter of each word
        return re.sub(r"(^|\s)(\S)", lambda m: m.group(1) + m.group(2).upper(), text)
    return text


def split_alternate_segments(text: str, separator: str = DEFAULT_ALTERNATE_SEPARATOR) -> List[Tuple[str, bool]]:
    """
    Split text into (segment, is_alternate) pairs.

    Runs enclosed in ``separator`` ("Buy ~now~") are flagged for the layer's
    alternate style; the separators themselves are dropped.
    """
    if not separator:
        return [(text, False)] if text else []

    sep = re.escape(separator)
    pattern = re.compile(f"{sep}((?:(?!{sep}).)+){sep}", re.DOTALL)

    segments: List[Tuple[str, bool]] = []
    last_index = 0
    for match in pattern.finditer(text):
        if match.start() > last_index:
            segments.append((text[last_index:match.start()], False))
        segments.append((match.group(1), True))
        last_index = match.end()
    if last_index < len(text):
        segments.append((text[last_index:], False))
    return segments


# --- Pillow measurement ---

def _font_file_candidates(style: TextStyle) -> List[str]:
    family = style.family.strip()
    compact = family.replace(" ", "")
    suffixes: List[str] = []
    if style.is_bold and style.style == "italic":
        suffixes += ["-BoldItalic", " Bold Italic", "bi"]
    elif style.is_bold:
        suffixes += ["-Bold", " Bold", "bd"]
    elif style.style == "italic":
        suffixes += ["-Italic", " Italic", "i"]
    suffixes += ["-Regular", ""]

    names: List[str] = []
    for base in dict.fromkeys([family, compact, compact.lower()]):
        for suffix in suffixes:
            for ext in (".ttf", ".otf"):
                names.append(f"{base}{suffix}{ext}")
    return names


@lru_cache(maxsize=256)
def _resolve_font_path(family: str, bold: bool, italic: bool, font_dirs: Tuple[str, ...]) -> Optional[str]:
    style = TextStyle(family=family, weight=700 if bold else 400, style="italic" if italic else "normal")
    names = _font_file_candidates(style)
    for directory in font_dirs:
        root = Path(directory)
        if not root.is_dir():
            continue
        for name in names:
            direct = root / name
            if direct.is_file():
                return str(direct)
        for name in names:
            found = next(root.rglob(name), None)
            if found is not None:
                return str(found)
    for candidate in FALLBACK_FONT_PATHS:
        if Path(candidate).is_file():
            return candidate
    return None


@lru_cache(maxsize=512)
def _load_font(path: Optional[str], size: int):
    if path:
        try:
            return ImageFont.truetype(path, size=size)
        except OSError as e:
            logger.warning(f"Failed to load font {path}: {e}")
    return ImageFont.load_default(size=size)


class PillowTextMeasurer:
    """
    Measures text with Pillow, approximating CSS ``white-space: pre-wrap``
    with ``word-wrap: break-word``: explicit newlines are kept, lines wrap
    at spaces, and words wider than the box are broken between characters.
    """

    def __init__(self, font_dirs: Optional[List[str]] = None) -> None:
        self.font_dirs = tuple(font_dirs if font_dirs is not None else FONT_DIRS + SYSTEM_FONT_DIRS)

    def font_for(self, style: TextStyle, font_size: int):
        path = _resolve_font_path(style.family, style.is_bold, style.style == "italic", self.font_dirs)
        return _load_font(path, max(1, font_size))

    def measure_height(self, text: str, style: TextStyle, font_size: int, max_width: float) -> float:
        if not text:
            return 0.0
        lines = self.wrap(text, style, font_size, max_width)
        return len(lines) * font_size * style.line_height

    def wrap(self, text: str, style: TextStyle, font_size: int, max_width: float) -> List[str]:
        font = self.font_for(style, font_size)
        text = apply_text_transform(text, style.text_transform)

        def width(s: str) -> float:
            return font.getlength(s) + style.letter_spacing * len(s)

        lines: List[str] = []
        for paragraph in text.split("\n"):
            lines.extend(_wrap_paragraph(paragraph, width, max_width))
        return lines


def _wrap_paragraph(paragraph: str, width, max_width: float) -> List[str]:
    if not paragraph:
        return [""]

    lines: List[str] = []
    current = ""
    for token in re.findall(r"\S+|\s+", paragraph):
        if token.isspace():
            current += token
            continue
        if current.strip() and width(current + token) > max_width:
            lines.append(current.rstrip())
            current = ""
        if width(current + token) <= max_width:
            current += token
            continue
        # Word wider than the box on its own: break it between characters
        pieces = _break_word(current + token, width, max_width)
        lines.extend(pieces[:-1])
        current = pieces[-1]
    lines.append(current)
    return lines


def _break_word(word: str, width, max_width: float) -> List[str]:
    pieces: List[str] = []
    current = ""
    for char in word:
        if current and width(current + char) > max_width:
            pieces.append(current)
            current = char
        else:
            current += char
    pieces.append(current)
    return pieces
