"""
Editor state and the reducers that change it.

``EditorState`` is an immutable snapshot. Every reducer is a pure function
taking a state and returning a new one; nothing is mutated in place.

Template edits are recorded in a linear history of whole-template snapshots.
A new edit drops any snapshots after the current index (the "redo" branch)
and appends itself. Undo and redo only move the index. Selection and view
changes (zoom, pan, grid) are not recorded.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from core.constants import (
    DEFAULT_GRID_SIZE,
    DUPLICATE_LAYER_OFFSET,
    DUPLICATE_LAYER_SUFFIX,
    MAX_ZOOM,
    MIN_ZOOM,
)
from editor.layers import create_default_template, new_layer_id
from shared_types.template import Point, Template, parse_layer


@dataclass(frozen=True)
class EditorState:
    template: Template
    history: Tuple[Template, ...]
    history_index: int
    saved_template_id: Optional[str] = None
    has_unsaved_changes: bool = False
    selected_layer_id: Optional[str] = None
    zoom: float = 1.0
    pan_offset: Tuple[float, float] = (0.0, 0.0)
    show_grid: bool = False
    snap_to_grid: bool = True
    grid_size: int = DEFAULT_GRID_SIZE

    @classmethod
    def initial(cls, template: Optional[Template] = None) -> "EditorState":
        template = template or create_default_template()
        return cls(template=template, history=(template,), history_index=0)

    @property
    def layers(self):
        return self.template.layers

    @property
    def selected_layer(self):
        if self.selected_layer_id is None:
            return None
        return self.template.find_layer(self.selected_layer_id)


# --- History ---

def _commit(state: EditorState, template: Template, **changes: Any) -> EditorState:
    """Make ``template`` the live value and append it to history."""
    history = state.history[: state.history_index + 1] + (template,)
    return replace(
        state,
        template=template,
        history=history,
        history_index=len(history) - 1,
        has_unsaved_changes=True,
        **changes,
    )


def _with_layers(template: Template, layers) -> Template:
    return template.model_copy(update={"layers": list(layers)})


def _restore(state: EditorState, index: int) -> EditorState:
    template = state.history[index]
    selected = state.selected_layer_id
    if selected is not None and template.find_layer(selected) is None:
        selected = None
    return replace(
        state,
        template=template,
        history_index=index,
        selected_layer_id=selected,
        has_unsaved_changes=True,
    )


def can_undo(state: EditorState) -> bool:
    return state.history_index > 0


def can_redo(state: EditorState) -> bool:
    return state.history_index < len(state.history) - 1


def undo(state: EditorState) -> EditorState:
    if not can_undo(state):
        return state
    return _restore(state, state.history_index - 1)


def redo(state: EditorState) -> EditorState:
    if not can_redo(state):
        return state
    return _restore(state, state.history_index + 1)


# --- Template ---

def load_template(state: EditorState, template: Template, saved_template_id: Optional[str] = None) -> EditorState:
    """Open a template as a fresh editing session: new history, nothing selected, nothing unsaved."""
    return replace(
        state,
        template=template,
        history=(template,),
        history_index=0,
        saved_template_id=saved_template_id,
        has_unsaved_changes=False,
        selected_layer_id=None,
    )


def set_template(state: EditorState, template: Template) -> EditorState:
    return _commit(state, template, selected_layer_id=None)


def update_template(state: EditorState, updates: Dict[str, Any]) -> EditorState:
    """Shallow-merge template-level fields (name, size, background, ...)."""
    document = state.template.model_dump(by_alias=True, exclude_none=True)
    for key, value in updates.items():
        document[_document_key(Template, key)] = value
    return _commit(state, Template.model_validate(document))


def mark_saved(state: EditorState, template_id: str) -> EditorState:
    return replace(state, saved_template_id=template_id, has_unsaved_changes=False)


# --- Layers ---

def _document_key(model_cls, key: str) -> str:
    """Accept either the snake_case attribute or the camelCase document key."""
    field_info = model_cls.model_fields.get(key)
    if field_info is not None and field_info.alias:
        return field_info.alias
    return key


def merge_layer(layer, updates: Dict[str, Any]):
    """Shallow-merge ``updates`` into a layer and re-validate it as a layer."""
    document = layer.model_dump(by_alias=True, exclude_none=True)
    for key, value in updates.items():
        document[_document_key(type(layer), key)] = value
    if document.get("id") != layer.id:
        raise ValueError("Layer id cannot be changed")
    if document.get("type") != layer.type:
        raise ValueError("Layer type cannot be changed")
    return parse_layer(document)


def update_layer(state: EditorState, layer_id: str, updates: Dict[str, Any]) -> EditorState:
    if state.template.find_layer(layer_id) is None:
        return state
    layers = [merge_layer(layer, updates) if layer.id == layer_id else layer for layer in state.layers]
    return _commit(state, _with_layers(state.template, layers))


def add_layer(state: EditorState, layer) -> EditorState:
    """Append a layer in front of all others and select it."""
    if state.template.find_layer(layer.id) is not None:
        raise ValueError(f"Layer id already exists: {layer.id}")
    max_z_index = max([0] + [existing.z_index for existing in state.layers])
    new_layer = layer.model_copy(update={"z_index": max_z_index + 1})
    return _commit(
        state,
        _with_layers(state.template, [*state.layers, new_layer]),
        selected_layer_id=new_layer.id,
    )


def delete_layer(state: EditorState, layer_id: str) -> EditorState:
    if state.template.find_layer(layer_id) is None:
        return state
    layers = [layer for layer in state.layers if layer.id != layer_id]
    selected = None if state.selected_layer_id == layer_id else state.selected_layer_id
    return _commit(state, _with_layers(state.template, layers), selected_layer_id=selected)


def duplicate_layer(state: EditorState, layer_id: str) -> EditorState:
    layer = state.template.find_layer(layer_id)
    if layer is None:
        return state
    copy = layer.model_copy(update={
        "id": new_layer_id(),
        "name": f"{layer.name}{DUPLICATE_LAYER_SUFFIX}",
        "position": Point(
            x=layer.position.x + DUPLICATE_LAYER_OFFSET,
            y=layer.position.y + DUPLICATE_LAYER_OFFSET,
        ),
    })
    return _commit(
        state,
        _with_layers(state.template, [*state.layers, copy]),
        selected_layer_id=copy.id,
    )


def reorder_layers(state: EditorState, from_index: int, to_index: int) -> EditorState:
    """
    Move a layer within the array, then renumber every zIndex to match its
    new 0-based position (contiguous, no gaps).
    """
    layers = list(state.layers)
    if not 0 <= from_index < len(layers):
        return state
    moved = layers.pop(from_index)
    to_index = max(0, min(to_index, len(layers)))
    layers.insert(to_index, moved)
    reindexed = [layer.model_copy(update={"z_index": index}) for index, layer in enumerate(layers)]
    return _commit(state, _with_layers(state.template, reindexed))


def toggle_layer_visibility(state: EditorState, layer_id: str) -> EditorState:
    layer = state.template.find_layer(layer_id)
    if layer is None:
        return state
    return update_layer(state, layer_id, {"visible": not layer.is_visible})


def toggle_layer_lock(state: EditorState, layer_id: str) -> EditorState:
    layer = state.template.find_layer(layer_id)
    if layer is None:
        return state
    return update_layer(state, layer_id, {"locked": not layer.is_locked})


def select_layer(state: EditorState, layer_id: Optional[str]) -> EditorState:
    return replace(state, selected_layer_id=layer_id)


# --- View ---

def set_zoom(state: EditorState, zoom: float) -> EditorState:
    return replace(state, zoom=max(MIN_ZOOM, min(MAX_ZOOM, zoom)))


def set_pan(state: EditorState, x: float, y: float) -> EditorState:
    return replace(state, pan_offset=(x, y))


def toggle_grid(state: EditorState) -> EditorState:
    return replace(state, show_grid=not state.show_grid)


def toggle_snap(state: EditorState) -> EditorState:
    return replace(state, snap_to_grid=not state.snap_to_grid)
