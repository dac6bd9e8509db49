"""
Module: output.renderer

Purpose:
    Assemble compressed page rasters into a multi-page PDF using ReportLab.
    Each raster becomes one PDF page filled edge to edge at the canonical
    page size.

Key Functions:
    - render_to_pdf(): Write rasters to a PDF file
    - export_filename(): Artifact name for a document

Dependencies:
    - reportlab: PDF generation
    - output.compression: CompressedRaster

Used By:
    - output.pipeline
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Sequence

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .compression import CompressedRaster
from .config import ExportConfig

logger = logging.getLogger(__name__)


def export_filename(document_id: str) -> str:
    """
    Example:
        >>> export_filename("abc")
        'zine-abc.pdf'
    """
    return f"zine-{document_id}.pdf"


def render_to_pdf(
    rasters: Sequence[CompressedRaster],
    output_path: Path,
    config: ExportConfig,
    *,
    title: str = "",
) -> Path:
    """
    Render page rasters to a PDF file.

    Args:
        rasters: Compressed page rasters in page order
        output_path: Path to write PDF
        config: Export configuration (page size and DPI)
        title: PDF document title

    Returns:
        output_path

    Raises:
        OSError: If the PDF cannot be written
    """
    if not rasters:
        logger.warning("No pages to render, creating empty PDF")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    page_width_pt = _px_to_pt(config.page_width, config.dpi)
    page_height_pt = _px_to_pt(config.page_height, config.dpi)

    c = canvas.Canvas(str(output_path), pagesize=(page_width_pt, page_height_pt))
    if title:
        c.setTitle(title)

    for raster in rasters:
        c.drawImage(
            _raster_to_reader(raster),
            0,
            0,
            width=page_width_pt,
            height=page_height_pt,
        )
        c.showPage()

    c.save()

    logger.info(f"Rendered {len(rasters)} pages to {output_path}")
    return output_path


def _raster_to_reader(raster: CompressedRaster) -> ImageReader:
    return ImageReader(io.BytesIO(raster.data))


def _px_to_pt(px: float, dpi: int) -> float:
    """
    Convert pixels to PDF points.

    PDF points are 1/72 inch.
    """
    return px * 72.0 / dpi
