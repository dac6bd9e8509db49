"""
Unit tests for paint order and layer moves.
"""

from collections import Counter

from zine_toolkit.core.models import Element, ElementKind
from zine_toolkit.editor.layering import (
    LayerDirection,
    find_background,
    is_bottom,
    is_top,
    move_layer,
    next_z_index,
    render_order,
    shift_for_background,
)


def _el(element_id, z, kind=ElementKind.IMAGE):
    return Element(id=element_id, page_id="p1", kind=kind, content="x", z_index=z)


class TestRenderOrder:
    def test_render_order_when_mixed_z_then_ascending(self):
        elements = [_el("a", 3), _el("b", 1), _el("c", 2)]
        assert [el.id for el in render_order(elements)] == ["b", "c", "a"]

    def test_render_order_when_ties_then_insertion_order_kept(self):
        elements = [_el("a", 1), _el("b", 0), _el("c", 1), _el("d", 1)]
        assert [el.id for el in render_order(elements)] == ["b", "a", "c", "d"]

    def test_next_z_index_when_empty_then_one(self):
        assert next_z_index([]) == 1

    def test_next_z_index_when_elements_then_max_plus_one(self):
        assert next_z_index([_el("a", 4), _el("b", 2)]) == 5


class TestMoveLayer:
    def test_move_layer_when_topmost_moves_up_then_none(self):
        elements = [_el("a", 1), _el("b", 2)]
        assert is_top(elements, "b")
        assert move_layer(elements, "b", LayerDirection.UP) is None

    def test_move_layer_when_bottom_moves_down_then_none(self):
        elements = [_el("a", 1), _el("b", 2)]
        assert is_bottom(elements, "a")
        assert move_layer(elements, "a", LayerDirection.DOWN) is None

    def test_move_layer_when_up_then_swaps_with_neighbour(self):
        elements = [_el("a", 1), _el("b", 2), _el("c", 5)]
        moved, neighbour = move_layer(elements, "b", LayerDirection.UP)
        assert (moved.id, moved.z_index) == ("b", 5)
        assert (neighbour.id, neighbour.z_index) == ("c", 2)

    def test_move_layer_when_swapped_then_z_multiset_preserved(self):
        elements = [_el("a", 1), _el("b", 2), _el("c", 5)]
        swapped = {el.id: el for el in move_layer(elements, "b", LayerDirection.DOWN)}
        after = [swapped.get(el.id, el) for el in elements]
        assert Counter(el.z_index for el in after) == Counter(el.z_index for el in elements)
        assert [el.id for el in render_order(after)] == ["b", "a", "c"]

    def test_move_layer_when_accepts_plain_string_direction(self):
        elements = [_el("a", 1), _el("b", 2)]
        assert move_layer(elements, "a", "up") is not None

    def test_move_layer_when_unknown_id_then_none(self):
        assert move_layer([_el("a", 1)], "zzz", LayerDirection.UP) is None


class TestBackground:
    def test_shift_for_background_when_called_then_every_z_plus_one(self):
        shifted = shift_for_background([_el("a", 0), _el("b", 3)])
        assert [el.z_index for el in shifted] == [1, 4]

    def test_find_background_when_text_at_zero_then_ignored(self):
        elements = [_el("t", 0, ElementKind.TEXT), _el("bg", 0)]
        assert find_background(elements).id == "bg"
