"""
Tests for page snapshots under the two render modes.
"""

from zine_toolkit.core.models import Element, ElementKind, Page
from zine_toolkit.editor.state import EditorState
from zine_toolkit.output import AllPagesForCapture, SinglePage, snapshot_page, snapshot_pages


def _page(page_id, *z_indices):
    elements = tuple(
        Element(id=f"{page_id}-{i}", page_id=page_id, kind=ElementKind.IMAGE,
                content=f"src-{i}", z_index=z)
        for i, z in enumerate(z_indices)
    )
    return Page(id=page_id, document_id="d1", elements=elements)


class TestSnapshots:
    def test_snapshot_page_when_unordered_then_paint_order(self):
        snapshot = snapshot_page(_page("p1", 3, 1, 2), 0)
        assert [el.z_index for el in snapshot.elements] == [1, 2, 3]
        assert snapshot.image_sources == ["src-1", "src-2", "src-0"]

    def test_snapshot_pages_when_single_page_mode_then_one_page(self):
        state = EditorState("d1", [_page("p1", 1), _page("p2", 1)])
        state.set_current_index(1)

        snapshots = snapshot_pages(state)

        assert [s.page_id for s in snapshots] == ["p2"]
        assert snapshots[0].index == 1

    def test_snapshot_pages_when_capture_mode_then_every_page(self):
        state = EditorState("d1", [_page("p1", 1), _page("p2", 1), _page("p3")])
        snapshots = snapshot_pages(state, AllPagesForCapture())
        assert [s.index for s in snapshots] == [0, 1, 2]

    def test_snapshot_pages_when_index_out_of_range_then_empty(self):
        state = EditorState("d1", [_page("p1", 1)])
        assert snapshot_pages(state, SinglePage(5)) == []
