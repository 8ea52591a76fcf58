"""
Editor core.

State container, reducers and undo history for editing a template, plus the
pure helpers the editor UI is built on: layer preview styles, text auto-fit,
text animation frames, keyboard shortcuts and JSON export/import.
"""

from editor.state import EditorState
from editor.store import EditorStore

__all__ = ["EditorState", "EditorStore"]
