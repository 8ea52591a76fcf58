"""
Layer preview styles.

Maps each layer variant to the visual parameters the editor canvas draws
with: a box (position and size scaled by zoom, rotation, opacity), a
camelCase CSS-like ``style`` dict, and per-type extras such as text
segments or SVG attributes. Everything here is side-effect free except the
image loader fallback, which logs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from core.constants import DEFAULT_ALTERNATE_SEPARATOR, DEFAULT_BACKGROUND_COLOR, DEFAULT_IMAGE_RADIUS, DEFAULT_LINE_HEIGHT
from editor.text_fit import TextMeasurer, compute_font_size, split_alternate_segments
from shared_types.template import Gradient, ImageLayer, ShapeLayer, Template, TextLayer
from utils.color_utils import format_number, hex_to_rgba

logger = logging.getLogger(__name__)

ImageLoader = Callable[[str], Any]

PLACEHOLDER_NO_IMAGE = "Click to add image"
PLACEHOLDER_LOAD_FAILED = "Failed to load image"

_VERTICAL_ALIGN = {"top": "flex-start", "middle": "center", "bottom": "flex-end"}
_HORIZONTAL_ALIGN = {"left": "flex-start", "center": "center", "right": "flex-end"}


@dataclass(frozen=True)
class LayerBox:
    left: float
    top: float
    width: float
    height: float
    rotation: float
    opacity: float
    z_index: int
    visible: bool


@dataclass(frozen=True)
class TextSegment:
    text: str
    style: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LayerPreview:
    layer_id: str
    kind: str
    box: LayerBox
    style: Dict[str, Any]
    container_style: Dict[str, Any] = field(default_factory=dict)
    segments: List[TextSegment] = field(default_factory=list)
    font_size: Optional[float] = None
    svg: Optional[Dict[str, Any]] = None
    placeholder: Optional[str] = None


@dataclass(frozen=True)
class CanvasPreview:
    width: float
    height: float
    background: str
    layers: List[LayerPreview]
    grid_size: Optional[float] = None


def render_order(layers: List[Any]) -> List[Any]:
    """Back-to-front drawing order: zIndex ascending, ties kept in array order."""
    return sorted(layers, key=lambda layer: layer.z_index)


def snap_to_grid(value: float, grid_size: int, enabled: bool = True) -> float:
    if not enabled or grid_size <= 0:
        return value
    return round(value / grid_size) * grid_size


def layer_box(layer: Any, zoom: float = 1.0) -> LayerBox:
    return LayerBox(
        left=layer.position.x * zoom,
        top=layer.position.y * zoom,
        width=layer.size.width * zoom,
        height=layer.size.height * zoom,
        rotation=layer.rotation or 0,
        opacity=1 if layer.opacity is None else layer.opacity,
        z_index=layer.z_index,
        visible=layer.is_visible,
    )


def gradient_css(gradient: Gradient) -> str:
    stops = ", ".join(
        f"{hex_to_rgba(stop.color, stop.opacity)} {format_number(stop.offset * 100)}%"
        for stop in gradient.colors
    )
    if gradient.type == "linear":
        angle = gradient.angle if gradient.angle is not None else 0
        return f"linear-gradient({format_number(angle)}deg, {stops})"
    cx = (gradient.center_x if gradient.center_x is not None else 0.5) * 100
    cy = (gradient.center_y if gradient.center_y is not None else 0.5) * 100
    return f"radial-gradient(circle at {format_number(cx)}% {format_number(cy)}%, {stops})"


def canvas_background(template: Template) -> str:
    if template.background_gradient is not None:
        return gradient_css(template.background_gradient)
    return template.background_color or DEFAULT_BACKGROUND_COLOR


# --- Text ---

def _padding_css(top: float, right: float, bottom: float, left: float) -> str:
    return " ".join(f"{format_number(v)}px" for v in (top, right, bottom, left))


def text_preview(layer: TextLayer, box: LayerBox, measurer: Optional[TextMeasurer] = None) -> LayerPreview:
    text_box = layer.text_box
    shrinks = text_box is not None and text_box.enabled and text_box.overflow == "shrink"
    font_size = compute_font_size(layer, measurer) if (shrinks and measurer is not None) else layer.font.size

    container: Dict[str, Any] = {
        "display": "flex",
        "alignItems": _VERTICAL_ALIGN.get(layer.vertical_alignment, "center"),
        "justifyContent": _HORIZONTAL_ALIGN.get(layer.alignment, "center"),
        "overflow": "hidden",
    }
    if text_box is not None and text_box.enabled and text_box.padding is not None:
        p = text_box.padding
        container["padding"] = _padding_css(p.top, p.right, p.bottom, p.left)

    style: Dict[str, Any] = {
        "fontFamily": f'"{layer.font.family}", sans-serif',
        "fontSize": font_size,
        "fontWeight": layer.font.weight or 400,
        "fontStyle": layer.font.style or "normal",
        "color": layer.color,
        "textAlign": layer.alignment,
        "lineHeight": layer.line_height or DEFAULT_LINE_HEIGHT,
        "wordWrap": "break-word",
        "whiteSpace": "pre-wrap",
    }
    if layer.letter_spacing:
        style["letterSpacing"] = f"{format_number(layer.letter_spacing)}px"
    if layer.text_transform:
        style["textTransform"] = layer.text_transform
    if layer.shadow is not None:
        s = layer.shadow
        style["textShadow"] = (
            f"{format_number(s.offset_x)}px {format_number(s.offset_y)}px {format_number(s.blur)}px {s.color}"
        )
    if layer.stroke is not None:
        style["WebkitTextStroke"] = f"{format_number(layer.stroke.width)}px {layer.stroke.color}"
    if layer.background is not None:
        style["backgroundColor"] = layer.background.color
        style["padding"] = f"{format_number(layer.background.padding)}px"
        if layer.background.border_radius:
            style["borderRadius"] = f"{format_number(layer.background.border_radius)}px"
    if text_box is not None and text_box.overflow == "ellipsis":
        style["overflow"] = "hidden"
        style["textOverflow"] = "ellipsis"

    return LayerPreview(
        layer_id=layer.id,
        kind="text",
        box=box,
        style=style,
        container_style=container,
        segments=text_segments(layer, font_size),
        font_size=font_size,
    )


def text_segments(layer: TextLayer, font_size: float) -> List[TextSegment]:
    """Split text into plain runs and runs drawn with the layer's alternate style."""
    alternate = layer.alternate_style
    if alternate is None or not alternate.enabled:
        return [TextSegment(layer.text)]

    alt_font = alternate.font
    alt_style = {
        "fontFamily": (alt_font.family if alt_font and alt_font.family else layer.font.family),
        "fontSize": (alt_font.size if alt_font and alt_font.size else font_size),
        "fontWeight": (alt_font.weight if alt_font and alt_font.weight else layer.font.weight),
        "color": alternate.color or layer.color,
    }
    segments = split_alternate_segments(layer.text, alternate.separator or DEFAULT_ALTERNATE_SEPARATOR)
    if not segments:
        return [TextSegment(layer.text)]
    return [TextSegment(text, dict(alt_style) if is_alternate else {}) for text, is_alternate in segments]


# --- Image ---

def image_filter_css(layer: ImageLayer) -> str:
    """CSS filter chain, always in the order grayscale, brightness, contrast, blur, sepia."""
    filters = layer.filters
    if filters is None:
        return ""
    chain: List[str] = []
    if filters.grayscale:
        chain.append("grayscale(100%)")
    if filters.brightness is not None:
        chain.append(f"brightness({format_number(filters.brightness)})")
    if filters.contrast is not None:
        chain.append(f"contrast({format_number(filters.contrast)})")
    if filters.blur:
        chain.append(f"blur({format_number(filters.blur)}px)")
    if filters.sepia:
        chain.append("sepia(100%)")
    return " ".join(chain)


def image_mask_style(layer: ImageLayer) -> Dict[str, Any]:
    if layer.mask == "circle":
        return {"borderRadius": "50%"}
    if layer.mask == "rounded" or layer.border_radius:
        return {"borderRadius": f"{format_number(layer.border_radius or DEFAULT_IMAGE_RADIUS)}px"}
    return {}


def image_preview(layer: ImageLayer, box: LayerBox, image_loader: Optional[ImageLoader] = None) -> LayerPreview:
    container = image_mask_style(layer)
    if layer.border is not None:
        container["border"] = f"{format_number(layer.border.width)}px solid {layer.border.color}"

    placeholder = None
    if not layer.src:
        placeholder = PLACEHOLDER_NO_IMAGE
    elif image_loader is not None:
        try:
            image_loader(layer.src)
        except Exception as e:
            logger.warning(f"Failed to load image for layer {layer.id} from {layer.src}: {e}")
            placeholder = PLACEHOLDER_LOAD_FAILED

    style: Dict[str, Any] = {}
    if placeholder is None:
        style["objectFit"] = layer.fit
        filters = image_filter_css(layer)
        if filters:
            style["filter"] = filters

    return LayerPreview(
        layer_id=layer.id,
        kind="image",
        box=box,
        style=style,
        container_style=container,
        placeholder=placeholder,
    )


# --- Shape ---

def shape_fill_css(layer: ShapeLayer) -> str:
    if layer.gradient is not None:
        return gradient_css(layer.gradient)
    return layer.fill or "transparent"


def shape_preview(layer: ShapeLayer, box: LayerBox) -> LayerPreview:
    style: Dict[str, Any] = {"background": shape_fill_css(layer)}
    if layer.stroke is not None:
        style["border"] = f"{format_number(layer.stroke.width)}px solid {layer.stroke.color}"

    svg = None
    if layer.shape == "circle":
        style["borderRadius"] = "50%"
    elif layer.shape == "rectangle":
        if layer.border_radius:
            style["borderRadius"] = f"{format_number(layer.border_radius)}px"
    elif layer.shape == "line":
        svg = {
            "element": "line",
            "x1": "0",
            "y1": "0",
            "x2": "100%",
            "y2": "100%",
            "stroke": (layer.stroke.color if layer.stroke else None) or layer.fill or "#000",
            "strokeWidth": layer.stroke.width if layer.stroke else 2,
        }
    elif layer.shape == "polygon" and layer.points and len(layer.points) >= 3:
        svg = {
            "element": "polygon",
            "points": " ".join(f"{format_number(p.x)},{format_number(p.y)}" for p in layer.points),
            "fill": layer.fill or "transparent",
        }
        if layer.stroke is not None:
            svg["stroke"] = layer.stroke.color
            svg["strokeWidth"] = layer.stroke.width

    if svg is not None:
        style = {}

    return LayerPreview(layer_id=layer.id, kind="shape", box=box, style=style, svg=svg)


# --- Dispatch ---

def render_layer(
    layer: Any,
    zoom: float = 1.0,
    measurer: Optional[TextMeasurer] = None,
    image_loader: Optional[ImageLoader] = None,
) -> LayerPreview:
    box = layer_box(layer, zoom)
    if isinstance(layer, TextLayer):
        return text_preview(layer, box, measurer)
    if isinstance(layer, ImageLayer):
        return image_preview(layer, box, image_loader)
    if isinstance(layer, ShapeLayer):
        return shape_preview(layer, box)
    # Video layers have no editor preview beyond their box
    return LayerPreview(layer_id=layer.id, kind=layer.type, box=box, style={})


def render_template(
    template: Template,
    zoom: float = 1.0,
    measurer: Optional[TextMeasurer] = None,
    image_loader: Optional[ImageLoader] = None,
    show_grid: bool = False,
    grid_size: int = 0,
    include_hidden: bool = False,
) -> CanvasPreview:
    """Preview of the whole canvas with its layers back-to-front."""
    layers = [
        render_layer(layer, zoom, measurer, image_loader)
        for layer in render_order(template.layers)
        if include_hidden or layer.is_visible
    ]
    return CanvasPreview(
        width=template.width * zoom,
        height=template.height * zoom,
        background=canvas_background(template),
        layers=layers,
        grid_size=(grid_size * zoom) if show_grid and grid_size else None,
    )
