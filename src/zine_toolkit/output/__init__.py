"""
Output Package

Page capture and export: snapshots, rasterization, compression and PDF
assembly.
"""

from zine_toolkit.editor.state import AllPagesForCapture, RenderMode, SinglePage

from .config import ExportConfig
from .snapshot import PageSnapshot, snapshot_page, snapshot_pages
from .rasterizer import PillowRasterizer, Rasterizer, markup_to_text
from .compression import CompressedRaster, compress_raster
from .renderer import export_filename, render_to_pdf
from .pipeline import ExportPipeline, ExportResult

__all__ = [
    "AllPagesForCapture",
    "RenderMode",
    "SinglePage",
    "ExportConfig",
    "PageSnapshot",
    "snapshot_page",
    "snapshot_pages",
    "PillowRasterizer",
    "Rasterizer",
    "markup_to_text",
    "CompressedRaster",
    "compress_raster",
    "export_filename",
    "render_to_pdf",
    "ExportPipeline",
    "ExportResult",
]
