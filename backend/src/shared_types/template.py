"""
Shared types for the template document model.

A template is a canvas (size, background, output format) owning an ordered
list of layers. Layers are a tagged union on ``type``. Documents are
exchanged as camelCase JSON; Python attributes are snake_case.

Optional fields default to None and are left out of serialized output, so a
document that goes in comes back out unchanged. Unknown keys on layers are
kept for the same reason.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from core.constants import MAX_STRING_LENGTH


class DocumentModel(BaseModel):
    """Base for every part of a template document."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Geometry ---

class Point(DocumentModel):
    x: float
    y: float


class Size(DocumentModel):
    width: float
    height: float


# --- Paint ---

class ColorStop(DocumentModel):
    offset: float = Field(..., ge=0, le=1)
    color: str
    opacity: Optional[float] = Field(None, ge=0, le=1)


class Gradient(DocumentModel):
    type: Literal["linear", "radial"]
    colors: List[ColorStop]
    angle: Optional[float] = None  # linear, degrees
    center_x: Optional[float] = None  # radial, 0-1
    center_y: Optional[float] = None  # radial, 0-1


class Stroke(DocumentModel):
    color: str
    width: float


# --- Text ---

class FontSpec(DocumentModel):
    family: str
    size: float = Field(..., gt=0)
    weight: Optional[Union[int, str]] = None
    style: Optional[Literal["normal", "italic"]] = None


class PartialFontSpec(DocumentModel):
    family: Optional[str] = None
    size: Optional[float] = None
    weight: Optional[Union[int, str]] = None
    style: Optional[Literal["normal", "italic"]] = None


class Padding(DocumentModel):
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class TextBox(DocumentModel):
    enabled: bool
    max_width: float
    max_height: float
    overflow: Literal["shrink", "truncate", "ellipsis", "wrap"]
    auto_shrink: Optional[bool] = None
    min_font_size: Optional[float] = None
    max_font_size: Optional[float] = None
    padding: Optional[Padding] = None


class TextShadow(DocumentModel):
    color: str
    blur: float
    offset_x: float
    offset_y: float


class TextBackground(DocumentModel):
    color: str
    padding: float
    border_radius: Optional[float] = None


class AlternateStyle(DocumentModel):
    enabled: bool
    separator: str
    font: Optional[PartialFontSpec] = None
    color: Optional[str] = None


class TypewriterAnimation(DocumentModel):
    enabled: bool
    duration: float  # seconds for the full text to appear
    start_delay: float  # seconds
    char_delay: Optional[float] = None  # milliseconds
    cursor: Optional[bool] = None
    cursor_char: Optional[str] = None


class FadeAnimation(DocumentModel):
    enabled: bool
    duration: float
    start_delay: float


class SlideAnimation(DocumentModel):
    enabled: bool
    duration: float
    start_delay: float
    direction: Literal["left", "right", "top", "bottom"]


class TextAnimation(DocumentModel):
    type: Literal["none", "typewriter", "fade", "slide"]
    typewriter: Optional[TypewriterAnimation] = None
    fade: Optional[FadeAnimation] = None
    slide: Optional[SlideAnimation] = None


# --- Image ---

class ImageFilters(DocumentModel):
    grayscale: Optional[bool] = None
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    blur: Optional[float] = None
    sepia: Optional[bool] = None


# --- Layers ---

class BaseLayer(DocumentModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    position: Point
    size: Size
    rotation: Optional[float] = None
    opacity: Optional[float] = Field(None, ge=0, le=1)
    visible: Optional[bool] = None
    locked: Optional[bool] = None
    z_index: int
    dynamic_field: Optional[str] = None

    @property
    def is_visible(self) -> bool:
        return self.visible is not False

    @property
    def is_locked(self) -> bool:
        return bool(self.locked)


class TextLayer(BaseLayer):
    type: Literal["text"] = "text"
    text: str
    font: FontSpec
    color: str
    alignment: Literal["left", "center", "right"] = "center"
    vertical_alignment: Literal["top", "middle", "bottom"] = "middle"
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None
    text_transform: Optional[Literal["none", "uppercase", "lowercase", "capitalize"]] = None
    text_box: Optional[TextBox] = None
    shadow: Optional[TextShadow] = None
    stroke: Optional[Stroke] = None
    background: Optional[TextBackground] = None
    alternate_style: Optional[AlternateStyle] = None
    animation: Optional[TextAnimation] = None

    # Legacy flat font fields, superseded by ``font`` but still found in stored templates
    font_size: Optional[float] = None
    font_family: Optional[str] = None
    font_weight: Optional[str] = None
    font_style: Optional[Literal["normal", "italic"]] = None
    text_align: Optional[Literal["left", "center", "right", "justify"]] = None
    text_decoration: Optional[Literal["none", "underline", "overline", "line-through"]] = None


class ImageLayer(BaseLayer):
    type: Literal["image"] = "image"
    src: Optional[str] = None
    fit: Literal["cover", "contain", "fill", "none", "scale-down"] = "cover"
    filters: Optional[ImageFilters] = None
    mask: Optional[Literal["none", "circle", "rounded", "rectangle"]] = None
    border_radius: Optional[float] = None
    border: Optional[Stroke] = None


class ShapeLayer(BaseLayer):
    type: Literal["shape"] = "shape"
    shape: Literal["rectangle", "circle", "line", "polygon"]
    fill: Optional[str] = None
    stroke: Optional[Stroke] = None
    border_radius: Optional[float] = None
    gradient: Optional[Gradient] = None
    points: Optional[List[Point]] = None


class VideoLayer(BaseLayer):
    """Parsed and stored, but the editor has no tooling for it."""
    type: Literal["video"] = "video"
    src: str
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    muted: Optional[bool] = None
    loop: Optional[bool] = None
    fit: Literal["cover", "contain", "fill"] = "cover"
    filters: Optional[ImageFilters] = None


Layer = Annotated[
    Union[TextLayer, ImageLayer, ShapeLayer, VideoLayer],
    Field(discriminator="type"),
]

LAYER_ADAPTER: TypeAdapter[Any] = TypeAdapter(Layer)

OutputFormat = Literal["png", "jpg", "webp", "mp4", "gif"]


class TemplateFields(DocumentModel):
    """Template fields a client may write."""
    name: str = Field(..., min_length=1, max_length=MAX_STRING_LENGTH)
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    background_color: Optional[str] = None
    background_gradient: Optional[Gradient] = None
    layers: List[Layer] = Field(default_factory=list)
    output_format: OutputFormat = "png"
    fps: Optional[float] = Field(None, gt=0)
    duration: Optional[float] = Field(None, gt=0)


class Template(TemplateFields):
    """A complete template document, including server-assigned fields."""
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def find_layer(self, layer_id: str) -> Optional[Any]:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def editable_fields(self) -> Dict[str, Any]:
        """Document without id and timestamps, ready to create or update a stored copy."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude={"id", "created_at", "updated_at"},
        )

    def replacement_fields(self) -> Dict[str, Any]:
        """Editable fields with explicit nulls for unset optional fields, so an update overwrites them."""
        document = self.editable_fields()
        for name in TemplateFields.model_fields:
            if getattr(self, name) is None:
                document[to_camel(name)] = None
        return document


def parse_layer(data: Dict[str, Any]) -> Any:
    """Validate a camelCase layer document into its concrete layer type."""
    return LAYER_ADAPTER.validate_python(data)
