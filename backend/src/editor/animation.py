"""
Text layer animation frames.

``animation_frame`` answers "what does this text layer look like
``elapsed`` seconds into playback": how much text is visible, its opacity,
its offset from the resting position and whether the typewriter cursor is
drawn.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from core.constants import CURSOR_BLINK_SECONDS, DEFAULT_CURSOR_CHAR
from shared_types.template import TextLayer


@dataclass(frozen=True)
class AnimationFrame:
    text: str
    opacity: float = 1.0
    # Fraction of the layer box, (1.0, 0) is one full width to the right
    offset: Tuple[float, float] = (0.0, 0.0)
    show_cursor: bool = False
    cursor_char: str = DEFAULT_CURSOR_CHAR
    finished: bool = True


def ease_in_out(t: float) -> float:
    return 0.5 - math.cos(math.pi * t) / 2


def ease_out(t: float) -> float:
    return 1 - (1 - t) ** 2


def _progress(elapsed: float, start_delay: float, duration: float) -> float:
    if elapsed < start_delay:
        return 0.0
    if duration <= 0:
        return 1.0
    return min(1.0, (elapsed - start_delay) / duration)


_SLIDE_START = {
    "left": (-1.0, 0.0),
    "right": (1.0, 0.0),
    "top": (0.0, -1.0),
    "bottom": (0.0, 1.0),
}


def animation_frame(layer: TextLayer, elapsed: float) -> AnimationFrame:
    animation = layer.animation
    if animation is None or animation.type == "none":
        return AnimationFrame(text=layer.text)

    if animation.type == "typewriter" and animation.typewriter and animation.typewriter.enabled:
        tw = animation.typewriter
        progress = _progress(elapsed, tw.start_delay, tw.duration)
        visible = math.floor(len(layer.text) * progress)
        typing = elapsed >= tw.start_delay and progress < 1
        blink_on = int(max(0.0, elapsed) / CURSOR_BLINK_SECONDS) % 2 == 0
        return AnimationFrame(
            text=layer.text[:visible],
            show_cursor=bool(tw.cursor) and typing and blink_on,
            cursor_char=tw.cursor_char or DEFAULT_CURSOR_CHAR,
            finished=progress >= 1,
        )

    if animation.type == "fade" and animation.fade and animation.fade.enabled:
        fade = animation.fade
        progress = _progress(elapsed, fade.start_delay, fade.duration)
        return AnimationFrame(text=layer.text, opacity=ease_in_out(progress), finished=progress >= 1)

    if animation.type == "slide" and animation.slide and animation.slide.enabled:
        slide = animation.slide
        progress = _progress(elapsed, slide.start_delay, slide.duration)
        remaining = 1 - ease_out(progress)
        start_x, start_y = _SLIDE_START[slide.direction]
        return AnimationFrame(
            text=layer.text,
            offset=(start_x * remaining, start_y * remaining),
            finished=progress >= 1,
        )

    return AnimationFrame(text=layer.text)
