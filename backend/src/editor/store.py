"""
Editor store.

``EditorStore`` holds the current ``EditorState`` and applies reducers to
it. Collaborators are injected: a ``TemplateStorage`` for save/open and a
``TextMeasurer`` for previews. Subscribers are called with the new state
after every change.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from core.exceptions import TemplateStorageError
from editor import export, state as reducers
from editor.layers import create_default_template
from editor.preview import CanvasPreview, render_template
from editor.state import EditorState
from editor.text_fit import TextMeasurer
from services.template_storage import TemplateStorage
from shared_types.template import Template

logger = logging.getLogger(__name__)

Listener = Callable[[EditorState], None]


class EditorStore:
    def __init__(
        self,
        state: Optional[EditorState] = None,
        storage: Optional[TemplateStorage] = None,
        measurer: Optional[TextMeasurer] = None,
    ) -> None:
        self.state = state or EditorState.initial()
        self.storage = storage
        self.measurer = measurer
        self._listeners: List[Listener] = []

    # --- Subscription ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, reducer: Callable[..., EditorState], *args: Any) -> EditorState:
        new_state = reducer(self.state, *args)
        if new_state is not self.state:
            self.state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self.state

    # --- Accessors ---

    @property
    def template(self) -> Template:
        return self.state.template

    @property
    def selected_layer_id(self) -> Optional[str]:
        return self.state.selected_layer_id

    @property
    def selected_layer(self):
        return self.state.selected_layer

    def can_undo(self) -> bool:
        return reducers.can_undo(self.state)

    def can_redo(self) -> bool:
        return reducers.can_redo(self.state)

    # --- Reducer actions ---

    def undo(self) -> EditorState:
        return self.dispatch(reducers.undo)

    def redo(self) -> EditorState:
        return self.dispatch(reducers.redo)

    def load_template(self, template: Template, saved_template_id: Optional[str] = None) -> EditorState:
        return self.dispatch(reducers.load_template, template, saved_template_id)

    def set_template(self, template: Template) -> EditorState:
        return self.dispatch(reducers.set_template, template)

    def update_template(self, updates: Dict[str, Any]) -> EditorState:
        return self.dispatch(reducers.update_template, updates)

    def update_layer(self, layer_id: str, updates: Dict[str, Any]) -> EditorState:
        return self.dispatch(reducers.update_layer, layer_id, updates)

    def add_layer(self, layer) -> EditorState:
        return self.dispatch(reducers.add_layer, layer)

    def delete_layer(self, layer_id: str) -> EditorState:
        return self.dispatch(reducers.delete_layer, layer_id)

    def duplicate_layer(self, layer_id: str) -> EditorState:
        return self.dispatch(reducers.duplicate_layer, layer_id)

    def reorder_layers(self, from_index: int, to_index: int) -> EditorState:
        return self.dispatch(reducers.reorder_layers, from_index, to_index)

    def toggle_layer_visibility(self, layer_id: str) -> EditorState:
        return self.dispatch(reducers.toggle_layer_visibility, layer_id)

    def toggle_layer_lock(self, layer_id: str) -> EditorState:
        return self.dispatch(reducers.toggle_layer_lock, layer_id)

    def select_layer(self, layer_id: Optional[str]) -> EditorState:
        return self.dispatch(reducers.select_layer, layer_id)

    def set_zoom(self, zoom: float) -> EditorState:
        return self.dispatch(reducers.set_zoom, zoom)

    def set_pan(self, x: float, y: float) -> EditorState:
        return self.dispatch(reducers.set_pan, x, y)

    def toggle_grid(self) -> EditorState:
        return self.dispatch(reducers.toggle_grid)

    def toggle_snap(self) -> EditorState:
        return self.dispatch(reducers.toggle_snap)

    # --- Persistence ---

    def _require_storage(self) -> TemplateStorage:
        if self.storage is None:
            raise TemplateStorageError("No template storage configured")
        return self.storage

    def new_template(self) -> EditorState:
        return self.load_template(create_default_template())

    def save(self) -> Template:
        """
        Persist the current template: create it the first time, update it
        afterwards. Storage errors propagate and leave the state untouched.
        """
        storage = self._require_storage()
        template = self.state.template
        saved_id = self.state.saved_template_id

        if saved_id is None:
            saved = storage.create_template(template)
            logger.info(f"Created template {saved.id}")
        else:
            saved = storage.update_template(saved_id, template.replacement_fields())
            logger.info(f"Saved template {saved_id}")

        self.dispatch(reducers.mark_saved, saved.id)
        return saved

    def open(self, template_id: str) -> EditorState:
        template = self._require_storage().get_template(template_id)
        return self.load_template(template, template.id)

    def export_json(self) -> str:
        return export.export_template_json(self.state.template)

    def import_json(self, text: str) -> EditorState:
        """Replace the current template with imported JSON; invalid input raises and changes nothing."""
        template = export.import_template_json(text)
        return self.set_template(template)

    def export_backup(self) -> str:
        return export.export_backup(self._require_storage())

    def import_backup(self, text: str) -> List[Template]:
        return export.import_backup(self._require_storage(), text)

    # --- Preview ---

    def preview(self, image_loader=None) -> CanvasPreview:
        return render_template(
            self.state.template,
            zoom=self.state.zoom,
            measurer=self.measurer,
            image_loader=image_loader,
            show_grid=self.state.show_grid,
            grid_size=self.state.grid_size,
        )
