"""
Default-valued templates and layers for the editor's "new" actions.
"""

import uuid

from core.constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_LINE_HEIGHT,
    DEFAULT_MIN_FONT_SIZE,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_TEMPLATE_NAME,
    DEFAULT_TEMPLATE_SIZE,
)
from shared_types.template import (
    FontSpec,
    ImageLayer,
    Padding,
    Point,
    ShapeLayer,
    Size,
    Template,
    TextBox,
    TextLayer,
)


def new_layer_id() -> str:
    return str(uuid.uuid4())


def create_default_template() -> Template:
    return Template(
        name=DEFAULT_TEMPLATE_NAME,
        width=DEFAULT_TEMPLATE_SIZE,
        height=DEFAULT_TEMPLATE_SIZE,
        background_color=DEFAULT_BACKGROUND_COLOR,
        layers=[],
        output_format=DEFAULT_OUTPUT_FORMAT,
    )


def create_default_text_layer() -> TextLayer:
    return TextLayer(
        id=new_layer_id(),
        name="Text Layer",
        position=Point(x=100, y=100),
        size=Size(width=400, height=100),
        z_index=0,
        visible=True,
        opacity=1,
        text="Add your text here",
        font=FontSpec(family="Arial", size=32, weight=400, style="normal"),
        color="#000000",
        alignment="center",
        vertical_alignment="middle",
        line_height=DEFAULT_LINE_HEIGHT,
        text_box=TextBox(
            enabled=True,
            max_width=400,
            max_height=100,
            overflow="shrink",
            auto_shrink=False,
            min_font_size=DEFAULT_MIN_FONT_SIZE,
            max_font_size=32,
            padding=Padding(top=10, right=10, bottom=10, left=10),
        ),
    )


def create_default_image_layer() -> ImageLayer:
    return ImageLayer(
        id=new_layer_id(),
        name="Image Layer",
        position=Point(x=100, y=100),
        size=Size(width=400, height=300),
        z_index=0,
        visible=True,
        opacity=1,
        fit="cover",
    )


def create_default_shape_layer() -> ShapeLayer:
    return ShapeLayer(
        id=new_layer_id(),
        name="Shape Layer",
        position=Point(x=100, y=100),
        size=Size(width=200, height=200),
        z_index=0,
        visible=True,
        opacity=1,
        shape="rectangle",
        fill="#7c3aed",
    )
