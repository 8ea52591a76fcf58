"""
Keyboard shortcuts for the editor.

``handle_key`` maps a key press to a store action and reports whether the
event was consumed (the UI then suppresses the browser default).
"""

from dataclasses import dataclass

from core.constants import NUDGE_STEP, NUDGE_STEP_LARGE

_NUDGE_DIRECTIONS = {
    "ArrowLeft": (-1, 0),
    "ArrowRight": (1, 0),
    "ArrowUp": (0, -1),
    "ArrowDown": (0, 1),
}


@dataclass(frozen=True)
class KeyEvent:
    key: str
    ctrl: bool = False
    meta: bool = False
    shift: bool = False
    alt: bool = False

    @property
    def command(self) -> bool:
        """Ctrl on Windows/Linux, Cmd on macOS."""
        return self.ctrl or self.meta

    @property
    def letter(self) -> str:
        return self.key.lower() if len(self.key) == 1 else self.key


def handle_key(store, event: KeyEvent, typing: bool = False) -> bool:
    """Apply the shortcut for ``event``; ignored while the user is typing in a field."""
    if typing:
        return False

    selected_id = store.selected_layer_id
    key = event.letter

    if event.command:
        if key == "z" and not event.shift:
            store.undo()
            return True
        if (key == "z" and event.shift) or key == "y":
            store.redo()
            return True
        if key == "a":
            if selected_id is None and store.template.layers:
                store.select_layer(store.template.layers[0].id)
            return True
        if selected_id is not None:
            if key == "d":
                store.duplicate_layer(selected_id)
                return True
            if key == "h":
                store.toggle_layer_visibility(selected_id)
                return True
            if key == "l":
                store.toggle_layer_lock(selected_id)
                return True
        return False

    if key in ("Delete", "Backspace") and selected_id is not None:
        store.delete_layer(selected_id)
        return True

    if key == "Escape":
        store.select_layer(None)
        return True

    if key in _NUDGE_DIRECTIONS and selected_id is not None:
        if event.shift:
            return _nudge(store, selected_id, key, event.alt)
        if key in ("ArrowUp", "ArrowDown"):
            return _move_selection(store, selected_id, -1 if key == "ArrowUp" else 1)

    return False


def _nudge(store, layer_id: str, key: str, large: bool) -> bool:
    layer = store.template.find_layer(layer_id)
    if layer is None or layer.is_locked:
        return False
    step = NUDGE_STEP_LARGE if large else NUDGE_STEP
    dx, dy = _NUDGE_DIRECTIONS[key]
    position = {"x": layer.position.x + dx * step, "y": layer.position.y + dy * step}
    store.update_layer(layer_id, {"position": position})
    return True


def _move_selection(store, layer_id: str, delta: int) -> bool:
    layers = store.template.layers
    index = next((i for i, layer in enumerate(layers) if layer.id == layer_id), None)
    if index is None:
        return False
    target = index + delta
    if 0 <= target < len(layers):
        store.select_layer(layers[target].id)
    return True
