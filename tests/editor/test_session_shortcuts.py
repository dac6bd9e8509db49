"""
Tests for the default keyboard bindings of an EditorSession.
"""

import asyncio

from zine_toolkit.core.models import ElementDraft, ElementKind
from zine_toolkit.editor.commands import InteractionContext


class TestElementShortcuts:
    def test_copy_paste_when_text_selected_then_duplicated(self, make_session):
        async def scenario():
            session = await make_session()
            element = await session.elements.add_text()
            session.state.select_element(element.id)
            await session.handle_key("c", ctrl=True)
            await session.handle_key("v", ctrl=True)
            return session

        session = asyncio.run(scenario())
        assert session.state.current_page.element_count == 2

    def test_paste_when_image_selected_then_suppressed(self, make_session, image_uri):
        async def scenario():
            session = await make_session()
            page = session.state.current_page
            image = await session.elements.create(ElementDraft(
                page_id=page.id, kind=ElementKind.IMAGE, content=image_uri,
                width=100, height=100,
            ))
            session.state.select_element(image.id)
            await session.handle_key("c", meta=True)
            await session.handle_key("v", meta=True)
            return session

        session = asyncio.run(scenario())
        assert session.state.current_page.element_count == 1

    def test_delete_when_element_selected_then_removed(self, make_session):
        async def scenario():
            session = await make_session()
            element = await session.elements.add_text()
            session.state.select_element(element.id)
            handled = await session.handle_key("Delete")
            return handled, session

        handled, session = asyncio.run(scenario())
        assert handled is True
        assert session.state.current_page.is_empty

    def test_delete_when_editing_text_then_key_left_to_editor(self, make_session):
        async def scenario():
            session = await make_session()
            element = await session.elements.add_text()
            session.elements.on_double_click(element.id)
            context = session.context
            handled = await session.handle_key("Backspace")
            return context, handled, session

        context, handled, session = asyncio.run(scenario())
        assert context is InteractionContext.TEXT_EDITING
        assert handled is False
        assert session.state.current_page.element_count == 1

    def test_layer_keys_when_selected_then_z_swapped(self, make_session):
        async def scenario():
            session = await make_session()
            low = await session.elements.add_text()
            await session.elements.add_text()
            session.state.select_element(low.id)
            await session.handle_key("]")
            return session.state.find_element(low.id)

        assert asyncio.run(scenario()).z_index == 2


class TestPageShortcuts:
    def test_copy_paste_when_page_selected_then_page_duplicated(self, make_session):
        async def scenario():
            session = await make_session()
            await session.elements.add_text()
            session.state.select_page()
            await session.handle_key("c", ctrl=True)
            await session.handle_key("v", ctrl=True)
            return session

        session = asyncio.run(scenario())
        assert session.state.page_count == 2
        assert session.state.pages[1].element_count == 1

    def test_paste_when_nothing_selected_then_element_pasted(self, make_session):
        async def scenario():
            session = await make_session()
            element = await session.elements.add_text()
            session.clipboard.copy_element(element.id)
            session.state.clear_selection()
            await session.handle_key("v", ctrl=True)
            return session

        session = asyncio.run(scenario())
        assert session.state.current_page.element_count == 2

    def test_handle_key_when_unmapped_then_false(self, make_session):
        async def scenario():
            session = await make_session()
            return await session.handle_key("x")

        assert asyncio.run(scenario()) is False
