"""
Tests for the PIL page rasterizer.
"""

from PIL import Image

from zine_toolkit.core.errors import DecodeError
from zine_toolkit.core.models import CropInsets, Element, ElementKind
from zine_toolkit.output import ExportConfig, PageSnapshot, PillowRasterizer, markup_to_text
from zine_toolkit.output.rasterizer import PLACEHOLDER_FILL

WHITE = (255, 255, 255)
RED = (255, 0, 0)


def _image_element(**kwargs):
    fields = dict(id="e1", page_id="p1", kind=ElementKind.IMAGE, content="red",
                  position_x=100, position_y=100, width=100, height=100)
    fields.update(kwargs)
    return Element(**fields)


def _rasterize(*elements, images=None):
    rasterizer = PillowRasterizer(ExportConfig(page_width=300, page_height=400))
    rasterizer.prepare()
    snapshot = PageSnapshot(index=0, page_id="p1", elements=tuple(elements))
    images = images if images is not None else {"red": Image.new("RGBA", (50, 50), "red")}
    return rasterizer.rasterize(snapshot, images)


class TestPillowRasterizer:
    def test_rasterize_when_empty_page_then_background_at_page_size(self):
        raster = _rasterize()
        assert raster.mode == "RGB"
        assert raster.size == (300, 400)
        assert raster.getpixel((150, 200)) == WHITE

    def test_rasterize_when_image_then_drawn_at_box(self):
        raster = _rasterize(_image_element())
        assert raster.getpixel((150, 150)) == RED
        assert raster.getpixel((99, 150)) == WHITE
        assert raster.getpixel((201, 150)) == WHITE

    def test_rasterize_when_cropped_then_visible_region_only(self):
        raster = _rasterize(_image_element(crop=CropInsets(right=50)))
        assert raster.getpixel((125, 150)) == RED
        assert raster.getpixel((175, 150)) == WHITE

    def test_rasterize_when_partly_off_canvas_then_visible_part_drawn(self):
        raster = _rasterize(_image_element(position_x=-50, position_y=-50))
        assert raster.getpixel((10, 10)) == RED
        assert raster.getpixel((60, 60)) == WHITE

    def test_rasterize_when_image_failed_then_placeholder(self):
        failed = {"red": DecodeError("broken")}
        raster = _rasterize(_image_element(), images=failed)
        assert raster.getpixel((150, 110)) == PLACEHOLDER_FILL[:3]

    def test_rasterize_when_filter_then_applied(self):
        r, g, b = _rasterize(_image_element(filter="noir")).getpixel((150, 150))
        assert r == g == b

    def test_rasterize_when_text_then_ink_inside_box(self):
        text = Element(id="t1", page_id="p1", kind=ElementKind.TEXT,
                       content="<p>Hello zine</p>", position_x=20, position_y=20,
                       width=260, height=80)
        raster = _rasterize(text)
        region = raster.crop((20, 20, 280, 100)).convert("L")
        assert region.getextrema()[0] < 128

    def test_rasterize_when_z_order_then_later_paints_over(self):
        blue = Image.new("RGBA", (10, 10), "blue")
        lower = _image_element(id="low", z_index=1)
        upper = _image_element(id="high", content="blue", z_index=2)
        raster = _rasterize(lower, upper, images={"red": Image.new("RGBA", (10, 10), "red"),
                                                 "blue": blue})
        assert raster.getpixel((150, 150)) == (0, 0, 255)


class TestMarkupToText:
    def test_markup_when_paragraphs_then_lines(self):
        assert markup_to_text("<p>Hello <b>zine</b></p><p>Bye</p>") == "Hello zine\nBye"

    def test_markup_when_entities_then_decoded(self):
        assert markup_to_text("<p>Fish &amp; chips</p>") == "Fish & chips"

    def test_markup_when_empty_then_empty(self):
        assert markup_to_text("") == ""
