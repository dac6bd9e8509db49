"""
Module: editor.elements

Purpose:
    Element Store: every add, edit and delete of elements on the open
    document. Mutations of existing elements are applied to state first and
    persisted afterwards; a persistence failure is logged and the optimistic
    state kept. Creation persists first and is reflected once the backend
    returns the new identity.

Key Classes:
    - ElementStore: Element operations over EditorState and a repository

Dependencies:
    - editor.state, editor.interaction, editor.layering
    - images.provider: Intrinsic sizes
    - images.conversion: Background colour, background removal
    - store.repository: ZineRepository

Used By:
    - editor.clipboard
    - editor.session
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from zine_toolkit.core.errors import DecodeError, PersistenceError
from zine_toolkit.core.models import (
    CropInsets,
    Element,
    ElementDraft,
    ElementKind,
    NO_FILTER,
)
from zine_toolkit.images.conversion import (
    BackgroundRemover,
    solid_color_data_uri,
    to_png_data_uri,
)
from zine_toolkit.images.provider import ImageLoader
from zine_toolkit.store.repository import ZineRepository

from .config import EditorConfig
from .interaction import (
    CropSide,
    ResizeCorner,
    TextEditSession,
    ZoomControl,
    canvas_delta,
    clamp_position,
    compute_crop,
    compute_resize,
    intrinsic_display_size,
)
from .layering import (
    LayerDirection,
    find_background,
    move_layer,
    next_z_index,
)
from .state import EditorState

logger = logging.getLogger(__name__)


class ElementStore:
    """
    Element operations for the open document.

    Args:
        state: Live editor state
        repository: Persistence collaborator
        loader: Image loader used for natural sizes
        config: Editor configuration
        zoom: Zoom control shared with the canvas

    Example:
        >>> store = ElementStore(state, repository, loader)
        >>> element = asyncio.run(store.add_text())
    """

    def __init__(
        self,
        state: EditorState,
        repository: ZineRepository,
        loader: ImageLoader,
        config: Optional[EditorConfig] = None,
        zoom: Optional[ZoomControl] = None,
    ) -> None:
        self.state = state
        self.repository = repository
        self.loader = loader
        self.config = config or EditorConfig()
        self.zoom = zoom or ZoomControl(self.config)
        self.text_session = TextEditSession(self.update_content)
        self.resizing_element_id: Optional[str] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry helpers
    # ─────────────────────────────────────────────────────────────────────────

    def display_size(self, element: Element) -> Tuple[float, float]:
        """
        Size the element occupies on the canvas.

        Unsized images fall back to their natural size fitted into the
        intrinsic box; anything else unknown uses the fallback size.
        """
        if element.has_size:
            return (element.width, element.height)
        if element.is_image:
            try:
                natural = self.loader.natural_size(element.content)
                return intrinsic_display_size(*natural, self.config.intrinsic_max_size)
            except DecodeError as e:
                logger.debug(f"No natural size for element {element.id}: {e}")
        if element.is_text:
            return (self.config.text_box_width, self.config.text_box_height)
        size = self.config.fallback_element_size
        return (size, size)

    def clamp(self, x: float, y: float, width: float, height: float) -> Tuple[float, float]:
        return clamp_position(
            x, y, width, height, self.config.canvas_width, self.config.canvas_height
        )

    def _centered(self, width: float, height: float) -> Tuple[float, float]:
        return self.clamp(
            (self.config.canvas_width - width) / 2,
            (self.config.canvas_height - height) / 2,
            width,
            height,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Creation (persist first, then reflect)
    # ─────────────────────────────────────────────────────────────────────────

    async def create(self, draft: ElementDraft) -> Element:
        """
        Persist a draft and reflect the stored element in state.

        Raises:
            PersistenceError: If the backend rejects the insert
        """
        element = await self.repository.insert_element(draft)
        if not self.state.add_element(element):
            logger.warning(f"Created element {element.id} on page {draft.page_id} no longer open")
        return element

    async def _create_logged(self, draft: ElementDraft, what: str) -> Optional[Element]:
        try:
            element = await self.create(draft)
        except PersistenceError as e:
            logger.error(f"Failed to add {what}: {e}")
            return None
        logger.debug(f"Added {what} {element.id} at z={element.z_index}")
        return element

    async def add_text(self, content: Optional[str] = None) -> Optional[Element]:
        """Add a centred text element with default markup on the current page."""
        page = self.state.current_page
        if page is None:
            return None
        width, height = self.config.text_box_width, self.config.text_box_height
        x, y = self._centered(width, height)
        draft = ElementDraft(
            page_id=page.id,
            kind=ElementKind.TEXT,
            content=content if content is not None else self.config.default_text,
            position_x=x,
            position_y=y,
            z_index=next_z_index(page.elements),
        )
        return await self._create_logged(draft, "text")

    async def add_image(self, source: str) -> Optional[Element]:
        """
        Add an image at its intrinsic size, centred on the current page.

        Width and height stay unset so the image keeps following its natural
        size until first resized.
        """
        page = self.state.current_page
        if page is None:
            return None
        try:
            natural = self.loader.natural_size(source)
        except DecodeError as e:
            logger.error(f"Cannot add image: {e}")
            return None
        width, height = intrinsic_display_size(*natural, self.config.intrinsic_max_size)
        x, y = self._centered(width, height)
        draft = ElementDraft(
            page_id=page.id,
            kind=ElementKind.IMAGE,
            content=source,
            position_x=x,
            position_y=y,
            z_index=next_z_index(page.elements),
        )
        return await self._create_logged(draft, "image")

    async def add_sticker(self, source: str) -> Optional[Element]:
        """Add a sticker at the default width, height following its aspect ratio."""
        page = self.state.current_page
        if page is None:
            return None
        try:
            natural_w, natural_h = self.loader.natural_size(source)
        except DecodeError as e:
            logger.error(f"Cannot add sticker: {e}")
            return None
        width = self.config.sticker_width
        height = width / (natural_w / natural_h) if natural_w and natural_h else width
        x, y = self._centered(width, height)
        draft = ElementDraft(
            page_id=page.id,
            kind=ElementKind.IMAGE,
            content=source,
            position_x=x,
            position_y=y,
            width=width,
            height=height,
            z_index=next_z_index(page.elements),
        )
        return await self._create_logged(draft, "sticker")

    async def set_background_color(self, color: str) -> Optional[Element]:
        """
        Fill the current page with a solid colour.

        An existing background (image at z_index 0) is recoloured in place.
        Otherwise every element moves up one layer and a full-canvas image is
        created at z_index 0.
        """
        page = self.state.current_page
        if page is None:
            return None
        try:
            uri = solid_color_data_uri(
                color, self.config.canvas_width, self.config.canvas_height
            )
        except ValueError as e:
            logger.error(f"Invalid background colour {color!r}: {e}")
            return None

        existing = find_background(page.elements)
        if existing is not None:
            await self._mutate(existing.id, content=uri)
            return self.state.find_element(existing.id)

        for element in page.elements:
            await self._mutate(element.id, z_index=element.z_index + 1)

        draft = ElementDraft(
            page_id=page.id,
            kind=ElementKind.IMAGE,
            content=uri,
            width=self.config.canvas_width,
            height=self.config.canvas_height,
            z_index=0,
        )
        return await self._create_logged(draft, "background")

    async def remove_background(self, element_id: str, remover: BackgroundRemover) -> bool:
        """Replace an image's content with its background removed."""
        element = self.state.find_element(element_id)
        if element is None or not element.is_image:
            return False
        self.state.clear_text_editing()
        try:
            image = self.loader.load(element.content)
            processed = await remover.remove_background(image)
        except DecodeError as e:
            logger.error(f"Failed to remove background of {element_id}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Background remover failed for {element_id}: {e}")
            return False
        await self.update_content(element_id, to_png_data_uri(processed))
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations (optimistic)
    # ─────────────────────────────────────────────────────────────────────────

    async def _mutate(self, element_id: str, **changes: Any) -> bool:
        if not self.state.update_element(element_id, lambda el: el.with_changes(**changes)):
            return False
        try:
            await self.repository.update_element(element_id, **changes)
        except PersistenceError as e:
            logger.error(f"Failed to persist {sorted(changes)} for element {element_id}: {e}")
        return True

    async def move_to(self, element_id: str, x: float, y: float) -> bool:
        """Move an element to a canvas position, clamped into the page."""
        element = self.state.find_element(element_id)
        if element is None:
            return False
        x, y = self.clamp(x, y, *self.display_size(element))
        return await self._mutate(element_id, position_x=x, position_y=y)

    async def drag(self, element_id: str, dx: float, dy: float) -> bool:
        """
        Commit a drag gesture.

        Args:
            element_id: Dragged element
            dx: Screen-space pointer delta since the drag began
            dy: Screen-space pointer delta since the drag began

        Returns:
            False when the element is missing or being text-edited
        """
        element = self.state.find_element(element_id)
        if element is None:
            return False
        if self.state.editing_element_id == element_id:
            return False
        cdx, cdy = canvas_delta(dx, dy, self.zoom.scale)
        return await self.move_to(
            element_id, element.position_x + cdx, element.position_y + cdy
        )

    async def resize(
        self,
        element_id: str,
        corner: ResizeCorner,
        dx: float,
        dy: float,
    ) -> bool:
        """
        Commit a corner resize from screen-space pointer deltas.

        Images keep their aspect ratio; text resizes freely. Results below the
        size floor are rejected with no state change. The committed position is clamped
        into the page and an existing crop shrinks to fit the new size.
        """
        element = self.state.find_element(element_id)
        if element is None:
            return False
        width, height = self.display_size(element)
        cdx, cdy = canvas_delta(dx, dy, self.zoom.scale)
        result = compute_resize(
            corner,
            width,
            height,
            element.position_x,
            element.position_y,
            cdx,
            cdy,
            preserve_aspect=element.is_image,
            min_size=self.config.min_element_size,
        )
        if result is None:
            logger.debug(f"Rejected resize of {element_id} below the size floor")
            return False
        x, y = self.clamp(result.position_x, result.position_y, result.width, result.height)
        changes: dict[str, Any] = dict(
            width=result.width, height=result.height, position_x=x, position_y=y
        )
        if element.crop is not None:
            changes["crop"] = element.crop.clamped_to(
                result.width, result.height, min_visible=self.config.min_crop_visible
            )
        return await self._mutate(element_id, **changes)

    async def update_content(self, element_id: str, content: str) -> bool:
        return await self._mutate(element_id, content=content)

    async def update_filter(self, element_id: str, filter_name: str) -> bool:
        return await self._mutate(element_id, filter=filter_name or NO_FILTER)

    async def update_crop(self, element_id: str, crop: Optional[CropInsets]) -> bool:
        """Store a crop, clamped so a non-empty region stays visible."""
        element = self.state.find_element(element_id)
        if element is None or not element.is_image:
            return False
        if crop is not None:
            width, height = self.display_size(element)
            crop = crop.clamped_to(
                width, height, min_visible=self.config.min_crop_visible
            )
            if crop.is_empty:
                crop = None
        return await self._mutate(element_id, crop=crop)

    async def crop_gesture(
        self,
        element_id: str,
        side: CropSide,
        start: Optional[CropInsets],
        dx: float,
        dy: float,
    ) -> bool:
        """Commit a crop-handle drag from screen-space pointer deltas."""
        element = self.state.find_element(element_id)
        if element is None or not element.is_image:
            return False
        width, height = self.display_size(element)
        cdx, cdy = canvas_delta(dx, dy, self.zoom.scale)
        crop = compute_crop(
            side, start, cdx, cdy, width, height,
            min_visible=self.config.min_crop_visible,
        )
        return await self._mutate(element_id, crop=None if crop.is_empty else crop)

    async def move_layer(self, element_id: str, direction: LayerDirection) -> bool:
        """Swap z_index with the neighbour above or below; no-op at the boundary."""
        element = self.state.find_element(element_id)
        if element is None:
            return False
        page = self.state.get_page(element.page_id)
        swapped = move_layer(page.elements, element_id, direction)
        if swapped is None:
            return False
        for changed in swapped:
            await self._mutate(changed.id, z_index=changed.z_index)
        return True

    async def delete(self, element_id: str) -> bool:
        if self.resizing_element_id == element_id:
            self.resizing_element_id = None
        if not self.state.remove_element(element_id):
            return False
        try:
            await self.repository.delete_element(element_id)
        except PersistenceError as e:
            logger.error(f"Failed to delete element {element_id}: {e}")
        return True

    # ─────────────────────────────────────────────────────────────────────────
    # Pointer modes
    # ─────────────────────────────────────────────────────────────────────────

    def on_double_click(self, element_id: str) -> None:
        """Text enters edit mode; an image toggles resize mode and is selected."""
        element = self.state.find_element(element_id)
        if element is None:
            return
        if element.is_text:
            self.text_session.begin(element_id, element.content)
            self.state.editing_element_id = element_id
            self.state.select_element(element_id)
            return
        if self.resizing_element_id == element_id:
            self.resizing_element_id = None
        else:
            self.resizing_element_id = element_id
        self.state.select_element(element_id)

    async def edit_text(self, content: str) -> None:
        await self.text_session.on_change(content)

    async def end_text_edit(self) -> None:
        await self.text_session.on_blur()
        self.state.clear_text_editing()
