"""
Tests for element and page copy/paste.
"""

import asyncio

from zine_toolkit.core.models import CropInsets, ElementDraft, ElementKind


class TestElementClipboard:
    def test_paste_element_when_copied_then_new_identity_on_top(self, make_session):
        async def scenario():
            session = await make_session()
            source = await session.elements.add_text("<p>copy me</p>")
            session.clipboard.copy_element(source.id)
            pasted = await session.clipboard.paste_element()
            return session, source, pasted

        session, source, pasted = asyncio.run(scenario())
        assert pasted.id != source.id
        assert pasted.content == "<p>copy me</p>"
        assert (pasted.position_x, pasted.position_y) == (source.position_x, source.position_y)
        assert pasted.z_index == 2
        assert session.state.selected_element_id == pasted.id

    def test_paste_element_when_image_then_crop_and_filter_kept(self, make_session, image_uri):
        async def scenario():
            session = await make_session()
            page = session.state.current_page
            source = await session.elements.create(ElementDraft(
                page_id=page.id, kind=ElementKind.IMAGE, content=image_uri,
                width=200, height=100, filter="vintage", crop=CropInsets(left=20),
            ))
            session.clipboard.copy_element(source.id)
            return await session.clipboard.paste_element()

        pasted = asyncio.run(scenario())
        assert pasted.filter == "vintage"
        assert pasted.crop == CropInsets(left=20)

    def test_paste_element_when_source_edited_after_copy_then_snapshot_used(self, make_session):
        async def scenario():
            session = await make_session()
            source = await session.elements.add_text("<p>before</p>")
            session.clipboard.copy_element(source.id)
            await session.elements.update_content(source.id, "<p>after</p>")
            return await session.clipboard.paste_element()

        assert asyncio.run(scenario()).content == "<p>before</p>"

    def test_copy_element_when_nothing_selected_then_false(self, make_session):
        async def scenario():
            session = await make_session()
            return session.clipboard.copy_element()

        assert asyncio.run(scenario()) is False

    def test_paste_element_when_insert_fails_then_state_untouched(
        self, make_session, flaky_repository
    ):
        async def scenario():
            session = await make_session(flaky_repository)
            source = await session.elements.add_text()
            session.clipboard.copy_element(source.id)
            flaky_repository.fail_inserts_after = 0
            pasted = await session.clipboard.paste_element()
            return session, pasted

        session, pasted = asyncio.run(scenario())
        assert pasted is None
        assert session.state.current_page.element_count == 1


class TestPageClipboard:
    def test_paste_page_when_copied_then_inserted_after_current(self, make_session):
        async def scenario():
            session = await make_session()
            first = await session.elements.add_text("<p>one</p>")
            await session.elements.add_text("<p>two</p>")
            await session.pages.add_page()
            session.pages.set_current_page(0)
            session.clipboard.copy_page()
            pasted = await session.clipboard.paste_page()
            stored = await session.repository.list_pages(session.state.document_id)
            return session, first, pasted, stored

        session, first, pasted, stored = asyncio.run(scenario())
        assert session.state.page_count == 3
        assert session.state.current_index == 1
        assert session.state.pages[1].id == pasted.id
        assert [el.content for el in pasted.elements] == ["<p>one</p>", "<p>two</p>"]
        assert all(el.id != first.id for el in pasted.elements)
        assert [page.id for page in stored] == [page.id for page in session.state.pages]
        assert [page.ordinal for page in stored] == [0, 1, 2]

    def test_paste_page_when_insert_fails_midway_then_partial_page_kept(
        self, make_session, flaky_repository
    ):
        async def scenario():
            session = await make_session(flaky_repository)
            for n in range(3):
                await session.elements.add_text(f"<p>{n}</p>")
            session.clipboard.copy_page()
            flaky_repository.fail_inserts_after = 1
            pasted = await session.clipboard.paste_page()
            return session, pasted

        session, pasted = asyncio.run(scenario())
        assert pasted.element_count == 1
        assert session.state.page_count == 2

    def test_paste_page_when_nothing_copied_then_none(self, make_session):
        async def scenario():
            session = await make_session()
            return await session.clipboard.paste_page()

        assert asyncio.run(scenario()) is None
