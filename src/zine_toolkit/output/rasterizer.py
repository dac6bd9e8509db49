"""
Module: output.rasterizer

Purpose:
    Draw a page snapshot onto a raster at the canonical page size. Elements
    are painted in snapshot order; images go through filter, size, scale and
    crop; text markup is flattened to wrapped plain text. Images that failed
    to decode are drawn as a grey placeholder with a cross.

Key Classes:
    - Rasterizer: Abstract rasterizer
    - PillowRasterizer: PIL implementation

Dependencies:
    - PIL: Image, ImageDraw, ImageFont
    - html.parser (std): Markup flattening
    - images.filters: Filter presets

Used By:
    - output.pipeline
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from html.parser import HTMLParser
from typing import List, Mapping, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from zine_toolkit.core.errors import DecodeError, ResourceError
from zine_toolkit.core.models import Element
from zine_toolkit.editor.interaction import intrinsic_display_size
from zine_toolkit.images.filters import apply_filter

from .config import ExportConfig
from .snapshot import PageSnapshot

logger = logging.getLogger(__name__)

ImageMap = Mapping[str, Union[Image.Image, DecodeError]]

PLACEHOLDER_FILL = (204, 204, 204, 255)
PLACEHOLDER_LINE = (136, 136, 136, 255)
TEXT_COLOR = (0, 0, 0, 255)


class Rasterizer(ABC):
    """Turns page snapshots into RGB rasters."""

    def prepare(self) -> None:
        """
        Acquire whatever the rasterizer draws with.

        Raises:
            ResourceError: If the rendering context is unavailable
        """

    @abstractmethod
    def rasterize(self, snapshot: PageSnapshot, images: ImageMap) -> Image.Image:
        """
        Draw one page.

        Args:
            snapshot: Page to draw
            images: Preloaded sources; missing or failed ones get a placeholder

        Returns:
            RGB image at the configured page size
        """


class PillowRasterizer(Rasterizer):
    """
    PIL rasterizer.

    Example:
        >>> raster = PillowRasterizer().rasterize(snapshot, images)
        >>> raster.size
        (900, 1200)
    """

    def __init__(
        self,
        config: Optional[ExportConfig] = None,
        intrinsic_max_size: int = 300,
    ) -> None:
        self.config = config or ExportConfig()
        self.intrinsic_max_size = intrinsic_max_size
        self._font: Optional[ImageFont.ImageFont] = None

    def prepare(self) -> None:
        try:
            self._font = ImageFont.load_default(size=self.config.text_font_size)
        except (OSError, ImportError) as e:
            raise ResourceError(f"No font available for text rendering: {e}") from e

    def rasterize(self, snapshot: PageSnapshot, images: ImageMap) -> Image.Image:
        if self._font is None:
            self.prepare()
        canvas = Image.new("RGBA", self.config.page_size, self.config.background_color)
        for element in snapshot.elements:
            if element.is_image:
                self._draw_image(canvas, element, images.get(element.content))
            else:
                self._draw_text(canvas, element)
        return canvas.convert("RGB")

    # ─────────────────────────────────────────────────────────────────────────
    # Images
    # ─────────────────────────────────────────────────────────────────────────

    def _box_size(self, element: Element, image: Optional[Image.Image]) -> Tuple[int, int]:
        if element.has_size:
            width, height = element.width, element.height
        elif image is not None:
            width, height = intrinsic_display_size(*image.size, self.intrinsic_max_size)
        else:
            width = height = self.intrinsic_max_size
        scale = element.scale or 1.0
        return max(1, round(width * scale)), max(1, round(height * scale))

    def _draw_image(
        self,
        canvas: Image.Image,
        element: Element,
        source: Optional[Union[Image.Image, DecodeError]],
    ) -> None:
        image = source if isinstance(source, Image.Image) else None
        width, height = self._box_size(element, image)
        position = (round(element.position_x), round(element.position_y))

        if image is None:
            logger.debug(f"Placeholder for element {element.id}")
            _draw_placeholder(canvas, position, (width, height))
            return

        drawn = apply_filter(image, element.filter).convert("RGBA")
        drawn = drawn.resize((width, height), Image.Resampling.LANCZOS)
        if element.crop is not None and not element.crop.is_empty:
            crop = element.crop.clamped_to(width, height)
            drawn = drawn.crop((
                round(crop.left),
                round(crop.top),
                max(round(crop.left) + 1, round(width - crop.right)),
                max(round(crop.top) + 1, round(height - crop.bottom)),
            ))
        x, y = position
        if x < 0 or y < 0:
            # alpha_composite only accepts non-negative destinations
            if -x >= drawn.width or -y >= drawn.height:
                return
            drawn = drawn.crop((max(0, -x), max(0, -y), drawn.width, drawn.height))
            position = (max(0, x), max(0, y))
        canvas.alpha_composite(drawn, dest=position)

    # ─────────────────────────────────────────────────────────────────────────
    # Text
    # ─────────────────────────────────────────────────────────────────────────

    def _draw_text(self, canvas: Image.Image, element: Element) -> None:
        padding = self.config.text_padding
        box_width = (element.width or canvas.width - element.position_x) - 2 * padding
        draw = ImageDraw.Draw(canvas)
        lines = _wrap(draw, markup_to_text(element.content), self._font, max(1, box_width))
        if not lines:
            return
        draw.multiline_text(
            (element.position_x + padding, element.position_y + padding),
            "\n".join(lines),
            font=self._font,
            fill=TEXT_COLOR,
        )


def _draw_placeholder(
    canvas: Image.Image,
    position: Tuple[int, int],
    size: Tuple[int, int],
) -> None:
    x, y = position
    width, height = size
    right, bottom = x + width - 1, y + height - 1
    draw = ImageDraw.Draw(canvas)
    draw.rectangle((x, y, right, bottom), fill=PLACEHOLDER_FILL, outline=PLACEHOLDER_LINE)
    draw.line((x, y, right, bottom), fill=PLACEHOLDER_LINE, width=3)
    draw.line((x, bottom, right, y), fill=PLACEHOLDER_LINE, width=3)


class _TextExtractor(HTMLParser):
    _BREAKS = {"p", "div", "br", "li", "h1", "h2", "h3", "h4", "h5", "h6"}

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []

    def handle_starttag(self, tag, attrs) -> None:
        if tag in self._BREAKS and self.parts and not self.parts[-1].endswith("\n"):
            self.parts.append("\n")

    def handle_endtag(self, tag) -> None:
        if tag in self._BREAKS:
            self.parts.append("\n")

    def handle_data(self, data) -> None:
        self.parts.append(data)


def markup_to_text(markup: str) -> str:
    """
    Flatten rich-text markup to plain text, one line per block.

    Example:
        >>> markup_to_text("<p>Hello <b>zine</b></p><p>Bye</p>")
        'Hello zine\\nBye'
    """
    parser = _TextExtractor()
    parser.feed(markup or "")
    parser.close()
    lines = [line.strip() for line in "".join(parser.parts).split("\n")]
    return "\n".join(line for line in lines if line)


def _wrap(draw: ImageDraw.ImageDraw, text: str, font, max_width: float) -> List[str]:
    wrapped: List[str] = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split():
            candidate = f"{line} {word}" if line else word
            if line and draw.textlength(candidate, font=font) > max_width:
                wrapped.append(line)
                line = word
            else:
                line = candidate
        if line:
            wrapped.append(line)
    return wrapped
