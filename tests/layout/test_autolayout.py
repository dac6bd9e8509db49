"""
Tests for auto-layout across pages, including failure and upload handling.
"""

import asyncio
import random

from zine_toolkit.images import Upload
from zine_toolkit.layout import partition_batches


class TestAutoLayout:
    def test_auto_layout_when_many_images_then_one_page_per_batch(
        self, make_session, make_image_uri
    ):
        sources = [make_image_uri(color=c) for c in
                   ("red", "green", "blue", "white", "black", "yellow", "gray")]
        expected_batches = partition_batches(sources, random.Random(11))
        progress = []

        async def scenario():
            session = await make_session(rng=random.Random(11))
            first_page = session.state.current_page.id
            result = await session.auto_layout(
                sources, lambda done, total: progress.append((done, total))
            )
            return session, first_page, result

        session, first_page, result = asyncio.run(scenario())

        assert result.completed
        assert result.page_count == len(expected_batches)
        assert result.page_ids[0] == first_page
        assert len(result.element_ids) == len(sources)
        assert session.state.page_count == len(expected_batches)
        assert progress[-1] == (len(expected_batches), len(expected_batches))
        assert [len(p.placements) for p in result.plans] == [len(b) for b in expected_batches]

    def test_auto_layout_when_open_page_has_content_then_new_page_used(
        self, make_session, image_uri
    ):
        async def scenario():
            session = await make_session(rng=random.Random(0))
            await session.elements.add_text()
            first_page = session.state.current_page.id
            result = await session.auto_layout([image_uri])
            return first_page, result

        first_page, result = asyncio.run(scenario())
        assert result.page_ids[0] != first_page

    def test_auto_layout_when_insert_fails_then_stops_and_keeps_created(
        self, make_session, flaky_repository, make_image_uri
    ):
        flaky_repository.fail_inserts_after = 2
        sources = [make_image_uri(color=c) for c in ("red", "green", "blue", "white", "black")]

        async def scenario():
            session = await make_session(flaky_repository, rng=random.Random(4))
            return await session.auto_layout(sources)

        result = asyncio.run(scenario())
        assert not result.completed
        assert result.error is not None
        assert len(result.element_ids) == 2

    def test_auto_layout_when_no_sources_then_empty_result(self, make_session):
        async def scenario():
            session = await make_session()
            return await session.auto_layout([])

        result = asyncio.run(scenario())
        assert result.page_count == 0
        assert result.completed

    def test_auto_layout_uploads_when_one_broken_then_skipped_with_warning(
        self, make_session, sample_image
    ):
        uploads = [
            Upload("good.png", sample_image.read_bytes()),
            Upload("broken.png", b"not an image"),
        ]

        async def scenario():
            session = await make_session(rng=random.Random(2))
            return session, await session.auto_layout_uploads(uploads)

        session, result = asyncio.run(scenario())
        assert len(result.element_ids) == 1
        assert any("broken.png" in w for w in result.warnings)
        element = session.state.find_element(result.element_ids[0])
        assert element.content.startswith("data:image/webp;base64,")
