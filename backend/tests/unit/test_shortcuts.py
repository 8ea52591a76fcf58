"""
Unit tests for editor keyboard shortcuts.
"""

import pytest

from editor.shortcuts import KeyEvent, handle_key
from editor.store import EditorStore
from shared_types.template import Point


@pytest.fixture
def store(sample_template) -> EditorStore:
    store = EditorStore()
    store.load_template(sample_template, "tpl-1")
    return store


class TestHistoryShortcuts:
    def test_ctrl_z_undoes_and_ctrl_shift_z_redoes(self, store):
        store.update_layer("headline", {"text": "Edited"})

        assert handle_key(store, KeyEvent("z", ctrl=True))
        assert store.template.find_layer("headline").text == "Big ~Summer~ Sale"

        assert handle_key(store, KeyEvent("Z", meta=True, shift=True))
        assert store.template.find_layer("headline").text == "Edited"

    def test_ctrl_y_redoes(self, store):
        store.update_layer("headline", {"text": "Edited"})
        store.undo()
        assert handle_key(store, KeyEvent("y", ctrl=True))
        assert store.template.find_layer("headline").text == "Edited"

    def test_ignored_while_typing(self, store):
        store.update_layer("headline", {"text": "Edited"})
        assert not handle_key(store, KeyEvent("z", ctrl=True), typing=True)
        assert store.template.find_layer("headline").text == "Edited"


class TestLayerShortcuts:
    def test_delete_removes_selected(self, store):
        store.select_layer("headline")
        assert handle_key(store, KeyEvent("Backspace"))
        assert store.template.find_layer("headline") is None

    def test_delete_without_selection_does_nothing(self, store):
        assert not handle_key(store, KeyEvent("Delete"))
        assert len(store.template.layers) == 2

    def test_duplicate(self, store):
        store.select_layer("headline")
        assert handle_key(store, KeyEvent("d", ctrl=True))
        assert store.template.layers[-1].name == "Headline Copy"

    def test_select_first_when_nothing_selected(self, store):
        assert handle_key(store, KeyEvent("a", ctrl=True))
        assert store.selected_layer_id == "headline"

        store.select_layer("backdrop")
        handle_key(store, KeyEvent("a", ctrl=True))
        assert store.selected_layer_id == "backdrop"

    def test_toggle_visibility_and_lock(self, store):
        store.select_layer("backdrop")
        handle_key(store, KeyEvent("h", ctrl=True))
        handle_key(store, KeyEvent("l", meta=True))
        layer = store.template.find_layer("backdrop")
        assert layer.visible is False
        assert layer.is_locked

    def test_escape_deselects(self, store):
        store.select_layer("headline")
        assert handle_key(store, KeyEvent("Escape"))
        assert store.selected_layer_id is None


class TestArrowKeys:
    def test_arrows_move_selection(self, store):
        store.select_layer("headline")
        handle_key(store, KeyEvent("ArrowDown"))
        assert store.selected_layer_id == "backdrop"

        handle_key(store, KeyEvent("ArrowDown"))
        assert store.selected_layer_id == "backdrop"

        handle_key(store, KeyEvent("ArrowUp"))
        assert store.selected_layer_id == "headline"

    @pytest.mark.parametrize("key,alt,expected", [
        ("ArrowLeft", False, (99, 100)),
        ("ArrowRight", False, (101, 100)),
        ("ArrowUp", True, (100, 90)),
        ("ArrowDown", True, (100, 110)),
    ])
    def test_shift_arrow_nudges(self, store, key, alt, expected):
        store.select_layer("headline")
        assert handle_key(store, KeyEvent(key, shift=True, alt=alt))
        assert store.template.find_layer("headline").position == Point(x=expected[0], y=expected[1])
        assert store.selected_layer_id == "headline"

    def test_locked_layer_is_not_nudged(self, store):
        store.toggle_layer_lock("headline")
        store.select_layer("headline")
        assert not handle_key(store, KeyEvent("ArrowRight", shift=True))
        assert store.template.find_layer("headline").position == Point(x=100, y=100)
